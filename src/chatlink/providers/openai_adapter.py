from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from chatlink.core.errors import ConfigError, FaultCategory, ProviderHttpFailure, TransportFailure
from chatlink.core.faults import translate_fault
from chatlink.core.ports import Message
from chatlink.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def _classify_openai_exception(exc: Exception, *, timeout: Optional[float] = None) -> Exception:
    """
    Convert SDK exceptions into the same two failure kinds the raw-HTTP adapters raise.
    Anything that is neither a status error nor a connection problem is returned unchanged.
    """
    if isinstance(exc, openai.APIStatusError):
        return ProviderHttpFailure(exc.status_code, exc.response.content)

    if isinstance(exc, openai.APITimeoutError):
        label = f"Request timed out (timeout={timeout}s)" if timeout is not None else "Request timed out"
        return TransportFailure(f"{label}: {exc}", FaultCategory.TIMEOUT)

    if isinstance(exc, openai.APIConnectionError):
        cause = exc.__cause__
        if isinstance(cause, Exception):
            return translate_fault(cause, timeout=timeout)
        return TransportFailure(f"Connection failed: {exc}", FaultCategory.CONNECTION)

    return exc


@ProviderRegistry.register("openai")
class OpenAIAdapter:
    """
    Thin adapter over the OpenAI SDK.
    - SDK retries are disabled; the caller owns retry policy
    - maps SDK errors to ProviderHttpFailure / TransportFailure
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        timeout: float = 60.0,
        base_url: Optional[str] = None,
        organization: Optional[str] = None,
    ):
        self.model = model
        client_kwargs: Dict[str, Any] = {"api_key": api_key, "timeout": timeout, "max_retries": 0}
        if base_url:
            client_kwargs["base_url"] = base_url
        if organization:
            client_kwargs["organization"] = organization
        self.client = OpenAI(**client_kwargs)

        self.params = params or {}
        self.timeout = timeout

    @classmethod
    def create(cls, *, model_name: str, provider_cfg: Dict[str, Any], secrets, client_cfg: Optional[Dict[str, Any]] = None) -> "OpenAIAdapter":
        api_key = secrets.secret("openai", "api_key")
        if not api_key:
            raise ConfigError("No API key for 'openai'")

        provider_cfg = provider_cfg or {}
        return cls(
            model=model_name,
            api_key=api_key,
            params=provider_cfg.get("params") or {},
            timeout=(client_cfg or {}).get("timeout", 60.0),
            base_url=provider_cfg.get("base_url"),
            organization=provider_cfg.get("organization"),
        )

    def chat(self, messages: List[Message]) -> Dict[str, str]:
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                **self.params,
            )
        except openai.OpenAIError as e:
            mapped = _classify_openai_exception(e, timeout=self.timeout)
            if mapped is e:
                raise
            if isinstance(mapped, TransportFailure):
                logger.warning("openai %s failure: %s", mapped.category.value, mapped.message)
            raise mapped from e
        msg = resp.choices[0].message
        return {"content": msg.content or ""}

    def close(self) -> None:
        self.client.close()
