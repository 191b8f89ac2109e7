from __future__ import annotations
import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ProviderError(Exception):
    """Base class for provider-level failures."""


@dataclass(frozen=True)
class ProviderErrorBody:
    """
    Structured part of an error envelope: {"type": "error", "error": {"type": ..., "message": ...}}.
    'type' is kept as an opaque tag; providers add new kinds without notice.
    """
    type: Optional[str]
    message: Optional[str]


def parse_error_body(body: Union[str, bytes, None]) -> Optional[ProviderErrorBody]:
    """
    Best-effort read of an error envelope. Returns None for anything that is not
    a JSON object whose top-level 'type' is "error". Never raises.
    """
    if not body:
        return None
    try:
        data = json.loads(body)
    except (ValueError, TypeError):
        return None
    if not isinstance(data, dict) or data.get("type") != "error":
        return None
    err = data.get("error")
    if not isinstance(err, dict):
        return ProviderErrorBody(type=None, message=None)
    kind = err.get("type")
    msg = err.get("message")
    return ProviderErrorBody(
        type=kind if isinstance(kind, str) else None,
        message=msg if isinstance(msg, str) else None,
    )


class ProviderHttpFailure(ProviderError):
    """
    The provider answered with a non-2xx status.
    str(exc) is the response body exactly as received; callers branch on status_code
    and may inspect the raw body for provider-specific error kinds.
    """

    def __init__(self, status_code: int, body: Union[str, bytes]):
        if isinstance(body, bytes):
            self.content = body
            self.body = body.decode("utf-8", errors="replace")
        else:
            self.content = body.encode("utf-8", errors="replace")
            self.body = body
        self.status_code = int(status_code)
        super().__init__(self.body)

    @property
    def error(self) -> Optional[ProviderErrorBody]:
        return parse_error_body(self.body)

    def __repr__(self) -> str:
        return f"ProviderHttpFailure(status_code={self.status_code}, body={self.body[:200]!r})"


class FaultCategory(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    OTHER = "other"


class TransportFailure(ProviderError):
    """
    No HTTP response was obtained: the deadline elapsed or the connection failed.
    'category' is the programmatic discriminant; the message is for display.
    """

    def __init__(self, message: str, category: FaultCategory = FaultCategory.OTHER):
        self.message = message
        self.category = FaultCategory(category)
        super().__init__(message)

    @property
    def is_timeout(self) -> bool:
        return self.category is FaultCategory.TIMEOUT


class ResponseDecodeError(ProviderError):
    """A 2xx response whose body could not be turned into a result."""


class ConfigError(ValueError):
    pass
