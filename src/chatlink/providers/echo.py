from __future__ import annotations
from typing import Any, Dict, List, Optional

from chatlink.core.ports import Message
from chatlink.providers.registry import ProviderRegistry


@ProviderRegistry.register("echo")
class EchoProvider:
    """
    Offline stub: replies with the last user message, optionally prefixed.
    Never touches the network, so it cannot fail with an HTTP or transport error.
    """

    def __init__(self, model: str = "echo", prefix: str = ""):
        self.model = model
        self.prefix = prefix

    @classmethod
    def create(cls, *, model_name: str, provider_cfg: Dict[str, Any], secrets, client_cfg: Optional[Dict[str, Any]] = None) -> "EchoProvider":
        return cls(model=model_name, prefix=str((provider_cfg or {}).get("prefix", "")))

    def chat(self, messages: List[Message]) -> Dict[str, str]:
        last_user = next((m for m in reversed(messages) if m.get("role") == "user"), None)
        text = str(last_user.get("content", "")) if last_user else ""
        return {"content": self.prefix + text}

    def close(self) -> None:
        pass
