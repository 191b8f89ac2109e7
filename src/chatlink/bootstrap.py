from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

from .config_loader import load_config
from .providers.registry import ProviderRegistry
from .secrets.sources import SecretsResolver


def configure_logging(level: Optional[str]) -> None:
    if level:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def build_provider(cfg: Dict[str, Any]):
    """Instantiate the configured adapter with its client options and secrets."""
    ProviderRegistry.ensure_imports()  # make sure built-ins register

    provider_name = cfg["model"]["provider"]
    model_name = cfg["model"]["name"]
    provider_cfg = (cfg.get("providers") or {}).get(provider_name) or {}

    secrets_cfg = cfg.get("secrets") or {}
    resolver = SecretsResolver(method=secrets_cfg.get("method", "env"), mapping=secrets_cfg.get("mapping"))

    Adapter = ProviderRegistry.get(provider_name)
    return Adapter.create(
        model_name=model_name,
        provider_cfg=provider_cfg,
        secrets=resolver,
        client_cfg=cfg["client"],
    )


def build_app(config_path: Path) -> Dict[str, Any]:
    """
    Composition root: load .env and YAML, set up logging, build the provider.
    Returns: dict with cfg, paths, provider.
    """
    load_dotenv()
    cfg = load_config(config_path)
    configure_logging((cfg.get("logging") or {}).get("level"))

    return {
        "cfg": cfg,
        "paths": {"config_dir": config_path.resolve().parent},
        "provider": build_provider(cfg),
    }
