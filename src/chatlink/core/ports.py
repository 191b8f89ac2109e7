from __future__ import annotations
from dataclasses import dataclass, field
from typing import Protocol, List, Dict, Any, Mapping

Message = Dict[str, Any]


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    content: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


class Transport(Protocol):
    """
    One POST exchange under the transport's own deadline.
    Returns the completed response whatever its status; raises if no response was obtained.
    """

    def post(self, url: str, *, headers: Mapping[str, str], content: bytes) -> TransportResponse:
        ...

    def close(self) -> None:
        ...


class Provider(Protocol):
    """
    Interface the core uses to talk to any LLM backend.
    """

    # Optional: surface the model name for logging/headers
    model: str

    def chat(self, messages: List[Message]) -> Dict[str, str]:
        """
        Synchronous call. Returns {'content': <assistant_text>}.
        'messages' should be OpenAI-style: [{'role': 'system'|'user'|'assistant', 'content': '...'}, ...]
        Raises ProviderHttpFailure or TransportFailure when the exchange fails.
        """
        ...
