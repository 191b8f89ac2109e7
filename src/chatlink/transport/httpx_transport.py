from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Mapping, Optional

import httpx

from chatlink.core.ports import TransportResponse
from chatlink.transport.logging_utils import log_request, log_response


@dataclass(frozen=True)
class ClientOptions:
    """
    Per-client settings, fixed at construction.
    timeout: seconds allowed for the whole exchange (connect + write + read).
    """
    timeout: float = 60.0
    log_requests: bool = False
    log_responses: bool = False

    def __post_init__(self):
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ValueError(f"timeout must be a positive number of seconds, got {self.timeout!r}")


class HttpxTransport:
    """
    Transport over a shared httpx.Client (thread-safe connection pool).
    The response is always read inside a `with` block so the connection goes back to
    the pool (or is closed) on success, timeout, and error alike.
    Bodies are read as raw wire bytes; compression is not requested, so nothing is
    decoded between the socket and the classifier.
    """

    def __init__(self, options: ClientOptions, *, transport: Optional[httpx.BaseTransport] = None):
        self.options = options
        self._client = httpx.Client(
            timeout=httpx.Timeout(options.timeout),
            headers={"accept-encoding": "identity"},
            transport=transport,
        )

    @property
    def timeout(self) -> float:
        return self.options.timeout

    def post(self, url: str, *, headers: Mapping[str, str], content: bytes) -> TransportResponse:
        if self.options.log_requests:
            log_request("POST", url, headers, content)

        start = time.monotonic()
        deadline = start + self.options.timeout
        with self._client.stream("POST", url, headers=dict(headers), content=content) as resp:
            chunks = []
            self._check_deadline(deadline, resp.request)
            for chunk in resp.iter_raw():
                chunks.append(chunk)
                self._check_deadline(deadline, resp.request)
            body = b"".join(chunks)

        if self.options.log_responses:
            log_response(url, resp.status_code, time.monotonic() - start, resp.headers, body)
        return TransportResponse(status_code=resp.status_code, content=body, headers=dict(resp.headers))

    def _check_deadline(self, deadline: float, request: httpx.Request) -> None:
        # httpx applies the timeout per phase; this caps the sum of them.
        if time.monotonic() > deadline:
            raise httpx.ReadTimeout(f"Read timed out after {self.options.timeout}s", request=request)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
