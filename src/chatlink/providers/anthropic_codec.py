from __future__ import annotations
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from chatlink.core.errors import ResponseDecodeError
from chatlink.core.ports import Message


class ContentBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    text: Optional[str] = None


class MessagesResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    model: Optional[str] = None
    content: List[ContentBlock] = []
    stop_reason: Optional[str] = None


def encode_request(model: str, messages: List[Message], *, max_tokens: int) -> bytes:
    """
    OpenAI-style history -> Messages API payload.
    System turns are lifted into the top-level 'system' field.
    """
    system_parts: List[str] = []
    turns: List[Dict[str, Any]] = []
    for m in messages:
        role = m.get("role")
        if role == "system":
            if m.get("content"):
                system_parts.append(str(m["content"]))
            continue
        turns.append({"role": role, "content": m.get("content", "")})

    payload: Dict[str, Any] = {"model": model, "max_tokens": max_tokens, "messages": turns}
    if system_parts:
        payload["system"] = "\n\n".join(system_parts)
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_response(content: bytes) -> Dict[str, str]:
    try:
        parsed = MessagesResponse.model_validate_json(content)
    except ValidationError as e:
        raise ResponseDecodeError(f"Unexpected success body: {e}") from e
    text = "".join(b.text or "" for b in parsed.content if b.type == "text")
    return {"content": text}
