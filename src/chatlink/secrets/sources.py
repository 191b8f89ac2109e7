# src/chatlink/secrets/sources.py

from __future__ import annotations
from typing import Protocol, Optional, Dict, Iterable, List, Union
import os, getpass, logging

try:
    import keyring as _keyring
    from keyring.errors import KeyringError as _KeyringError
except ImportError:
    _keyring = None  # optional extra
    _KeyringError = ()

logger = logging.getLogger(__name__)

# Conventional env var per provider when no mapping is configured
_DEFAULT_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class SecretSource(Protocol):
    def get(self, service: str) -> Optional[str]: ...


class EnvSource:
    def get(self, service: str) -> Optional[str]:
        # 1) exact env var name, 2) derived names
        for key in (service, _DEFAULT_ENV.get(service.lower(), ""), f"{service.upper()}_API_KEY"):
            if not key:
                continue
            val = os.getenv(key)
            if val and val.strip():
                return val.strip()
        return None


class KeyringSource:
    def get(self, service: str) -> Optional[str]:
        if _keyring is None:
            return None
        try:
            cred = _keyring.get_credential(service, None)
            if cred and getattr(cred, "password", None):
                return cred.password.strip()
            for account in ("api_key", "default", getpass.getuser()):
                val = _keyring.get_password(service, account)
                if val:
                    return val.strip()
        except _KeyringError as e:
            logger.debug("keyring lookup for %r failed: %s", service, e)
        return None


_SOURCES = {"env": EnvSource, "keyring": KeyringSource}


def build_secret_sources(method: Union[str, Iterable[str]]) -> List[SecretSource]:
    methods = [method] if isinstance(method, str) else list(method)
    seen: List[str] = []
    for m in methods:
        key = str(m).strip().lower()
        if key not in _SOURCES:
            raise ValueError(f"Unknown secrets method '{m}'. Allowed: {sorted(_SOURCES)}")
        if key not in seen:
            seen.append(key)
    return [_SOURCES[k]() for k in seen]


class SecretsResolver:
    """
    Resolve secrets using one or more methods in order.
    mapping: per-provider map of names -> service/env-key
      e.g. { "anthropic": { "api_key": "ANTHROPIC_API_KEY" } }
    """
    def __init__(self, method: Union[str, Iterable[str]] = "env", mapping: Dict[str, Dict[str, str]] | None = None):
        self._sources = build_secret_sources(method)
        self._map = mapping or {}

    def secret(self, provider: str, name: str = "api_key") -> Optional[str]:
        service = (self._map.get(provider) or {}).get(name, provider)
        for src in self._sources:
            val = src.get(service)
            if val:
                return val
        return None
