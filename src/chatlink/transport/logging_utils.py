from __future__ import annotations
import logging
from typing import Dict, Mapping

logger = logging.getLogger("chatlink.transport")

REDACTED_HEADERS = ("x-api-key", "authorization")
_MAX_LOGGED_BODY = 4096


def redact_headers(headers: Mapping[str, str], redact=REDACTED_HEADERS) -> Dict[str, str]:
    red = {h.lower() for h in redact}
    return {k: ("***REDACTED***" if k.lower() in red else v) for k, v in headers.items()}


def _snippet(content: bytes) -> str:
    text = content[:_MAX_LOGGED_BODY].decode("utf-8", errors="replace")
    return text + ("…" if len(content) > _MAX_LOGGED_BODY else "")


def log_request(method: str, url: str, headers: Mapping[str, str], content: bytes) -> None:
    logger.info(
        "HTTP request: %s %s headers=%s body=%s",
        method, url, redact_headers(headers), _snippet(content),
    )


def log_response(url: str, status_code: int, elapsed_s: float, headers: Mapping[str, str], content: bytes) -> None:
    logger.info(
        "HTTP response: %s status=%d elapsed_ms=%d headers=%s body=%s",
        url, status_code, int(elapsed_s * 1000), dict(headers), _snippet(content),
    )
