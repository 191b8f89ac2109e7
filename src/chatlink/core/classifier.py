from __future__ import annotations
from typing import Callable, TypeVar

from chatlink.core.errors import ProviderHttpFailure

T = TypeVar("T")


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def classify_response(status_code: int, content: bytes, decode: Callable[[bytes], T]) -> T:
    """
    Success range only, no allow-list of known codes: 2xx goes to the codec untouched,
    every other status raises ProviderHttpFailure with the body exactly as received.
    The body is not validated on the error path; empty or malformed bodies are attached as-is.
    """
    if is_success(status_code):
        return decode(content)
    raise ProviderHttpFailure(status_code, content)
