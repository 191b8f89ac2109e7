from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from chatlink.core.classifier import classify_response, is_success
from chatlink.core.errors import ConfigError
from chatlink.core.faults import translate_fault
from chatlink.core.ports import Message, Transport
from chatlink.providers.anthropic_codec import decode_response, encode_request
from chatlink.providers.registry import ProviderRegistry
from chatlink.transport.httpx_transport import ClientOptions, HttpxTransport

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
DEFAULT_VERSION = "2023-06-01"


@ProviderRegistry.register("anthropic")
class AnthropicAdapter:
    """
    Messages API over raw HTTP.
    - completed exchanges go through the response classifier (non-2xx -> ProviderHttpFailure)
    - transport exceptions go through the fault translator (-> TransportFailure)
    The two paths never overlap: the classifier runs outside the transport try-block.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        max_tokens: int = 1024,
        timeout: float = 60.0,
        log_requests: bool = False,
        log_responses: bool = False,
        version: str = DEFAULT_VERSION,
        transport: Optional[Transport] = None,
    ):
        self.model = model
        self.max_tokens = int(max_tokens)
        self.url = base_url.rstrip("/") + "/messages"
        self.options = ClientOptions(timeout=timeout, log_requests=log_requests, log_responses=log_responses)
        self._headers = {
            "x-api-key": api_key,
            "anthropic-version": version,
            "content-type": "application/json",
        }
        self.transport: Transport = transport or HttpxTransport(self.options)

    @classmethod
    def create(cls, *, model_name: str, provider_cfg: Dict[str, Any], secrets, client_cfg: Optional[Dict[str, Any]] = None) -> "AnthropicAdapter":
        api_key = secrets.secret("anthropic", "api_key")
        if not api_key:
            raise ConfigError("No API key for 'anthropic'")

        provider_cfg = provider_cfg or {}
        client_cfg = client_cfg or {}
        return cls(
            model=model_name,
            api_key=api_key,
            base_url=provider_cfg.get("base_url") or DEFAULT_BASE_URL,
            max_tokens=provider_cfg.get("max_tokens", 1024),
            version=provider_cfg.get("version") or DEFAULT_VERSION,
            timeout=client_cfg.get("timeout", 60.0),
            log_requests=bool(client_cfg.get("log_requests", False)),
            log_responses=bool(client_cfg.get("log_responses", False)),
        )

    def chat(self, messages: List[Message]) -> Dict[str, str]:
        content = encode_request(self.model, messages, max_tokens=self.max_tokens)
        try:
            resp = self.transport.post(self.url, headers=self._headers, content=content)
        except (httpx.TransportError, OSError) as e:
            failure = translate_fault(e, timeout=self.options.timeout)
            logger.warning("anthropic %s failure: %s", failure.category.value, failure.message)
            raise failure from e

        if not is_success(resp.status_code):
            logger.warning("anthropic returned HTTP %d", resp.status_code)
        return classify_response(resp.status_code, resp.content, decode_response)

    def chat_text(self, prompt: str) -> str:
        return self.chat([{"role": "user", "content": prompt}])["content"]

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "AnthropicAdapter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
