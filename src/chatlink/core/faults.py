from __future__ import annotations
import socket
from typing import Optional

import httpx

from chatlink.core.errors import FaultCategory, ProviderError, TransportFailure

_TIMEOUT_PHASES = (
    (httpx.ConnectTimeout, "Connect timeout"),
    (httpx.ReadTimeout, "Read timed out"),
    (httpx.WriteTimeout, "Write timeout"),
    (httpx.PoolTimeout, "Connection pool timeout"),
)


def _with_limit(text: str, timeout: Optional[float]) -> str:
    return f"{text} (timeout={timeout}s)" if timeout is not None else text


def _detail(exc: BaseException) -> str:
    msg = str(exc).strip()
    return f"{type(exc).__name__}: {msg}" if msg else type(exc).__name__


def translate_fault(exc: BaseException, *, timeout: Optional[float] = None) -> TransportFailure:
    """
    Convert a fault raised before any response arrived into a TransportFailure.
    The category is the contract; the message keeps the "timeout"/"timed out" wording
    for anyone still matching on text.
    """
    if isinstance(exc, ProviderError):
        # Already classified (or a response was obtained); never reinterpret.
        raise TypeError(f"{type(exc).__name__} is not a transport fault") from exc

    if isinstance(exc, httpx.TimeoutException):
        for klass, label in _TIMEOUT_PHASES:
            if isinstance(exc, klass):
                return TransportFailure(_with_limit(label, timeout) + f": {_detail(exc)}", FaultCategory.TIMEOUT)
        return TransportFailure(_with_limit("Request timeout", timeout) + f": {_detail(exc)}", FaultCategory.TIMEOUT)

    # socket.timeout is an alias of TimeoutError on current interpreters
    if isinstance(exc, (TimeoutError, socket.timeout)):
        return TransportFailure(_with_limit("Request timed out", timeout) + f": {_detail(exc)}", FaultCategory.TIMEOUT)

    if isinstance(exc, (httpx.ConnectError, ConnectionError)):
        return TransportFailure(f"Connection failed: {_detail(exc)}", FaultCategory.CONNECTION)

    if isinstance(exc, (httpx.TransportError, OSError)):
        return TransportFailure(f"Network error: {_detail(exc)}", FaultCategory.OTHER)

    return TransportFailure(f"Transport failure: {_detail(exc)}", FaultCategory.OTHER)
