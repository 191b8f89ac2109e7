# src/chatlink/config_loader.py

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
import yaml

from chatlink.core.errors import ConfigError

KNOWN_PROVIDERS = ("anthropic", "openai", "echo")


def _require(d: Dict[str, Any], dotted: str, typ: type) -> Any:
    cur: Any = d
    for k in dotted.split("."):
        if not isinstance(cur, dict) or k not in cur:
            raise ConfigError(f"Missing config key: {dotted}")
        cur = cur[k]
    if typ is str and not isinstance(cur, str):
        raise ConfigError(f"'{dotted}' must be a string")
    if typ is float and (isinstance(cur, bool) or not isinstance(cur, (int, float))):
        raise ConfigError(f"'{dotted}' must be a number")
    return cur


def load_config(path: Path) -> Dict[str, Any]:
    if not path or not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"Config is empty or invalid YAML: {path}")

    # Required keys (no defaults here)
    _require(raw, "model.provider", str)
    _require(raw, "model.name", str)
    timeout = _require(raw, "client.timeout", float)
    if timeout <= 0:
        raise ConfigError(f"'client.timeout' must be positive, got {timeout}")

    client = raw["client"]
    for flag in ("log_requests", "log_responses"):
        if flag in client and not isinstance(client[flag], bool):
            raise ConfigError(f"'client.{flag}' must be a boolean")

    provider = str(raw["model"]["provider"]).lower()
    if provider not in KNOWN_PROVIDERS:
        raise ConfigError(f"Unknown model.provider '{provider}' (expected one of {', '.join(KNOWN_PROVIDERS)}).")
    raw["model"]["provider"] = provider

    level = (raw.get("logging") or {}).get("level")
    if level is not None:
        if not isinstance(level, str):
            raise ConfigError("'logging.level' must be a string")
        raw["logging"]["level"] = level.upper()

    return raw
