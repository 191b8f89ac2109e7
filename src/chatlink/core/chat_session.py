from __future__ import annotations
from typing import List, Dict, Any, Optional


class ChatSession:
    """
    In-memory conversation over a Provider.
    A failed turn leaves history as it was before the turn; the failure propagates unchanged.
    """

    def __init__(self, model, system_prompt: Optional[str] = None):
        self.model = model
        self._messages: List[Dict[str, Any]] = []
        if system_prompt:
            self._messages.append({"role": "system", "content": system_prompt})

    @property
    def messages(self) -> List[Dict[str, Any]]:
        return list(self._messages)

    def run_turn(self, user_text: str) -> str:
        outgoing = self._messages + [{"role": "user", "content": user_text}]
        reply = self.model.chat(outgoing)
        content = reply["content"] if isinstance(reply, dict) else str(reply)
        self._messages = outgoing + [{"role": "assistant", "content": content}]
        return content

    def reset(self) -> None:
        self._messages = [m for m in self._messages if m.get("role") == "system"]
