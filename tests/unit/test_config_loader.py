# tests/unit/test_config_loader.py

from __future__ import annotations
import sys
from pathlib import Path
import pytest
from textwrap import dedent

# Make "src" importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chatlink.config_loader import load_config, ConfigError  # type: ignore


def write_yaml(p: Path, text: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dedent(text).lstrip("\n").rstrip() + "\n", encoding="utf-8")
    return p


def test_load_config_ok(tmp_path: Path):
    cfg = write_yaml(
        tmp_path / "config" / "default.yaml",
        """
        model: { provider: ANTHROPIC, name: claude-3-5-haiku-20241022 }
        client: { timeout: 2, log_requests: true }
        logging: { level: debug }
        """,
    )
    data = load_config(cfg)
    assert data["model"]["provider"] == "anthropic"   # normalised
    assert data["client"]["timeout"] == 2
    assert data["logging"]["level"] == "DEBUG"


def test_load_config_missing_key(tmp_path: Path):
    cfg = write_yaml(
        tmp_path / "config" / "default.yaml",
        """
        model: { name: claude-3-5-haiku-20241022 }   # missing provider
        client: { timeout: 2 }
        """,
    )
    with pytest.raises(ConfigError):
        load_config(cfg)


def test_load_config_missing_timeout(tmp_path: Path):
    cfg = write_yaml(
        tmp_path / "config" / "default.yaml",
        """
        model: { provider: anthropic, name: m }
        """,
    )
    with pytest.raises(ConfigError, match="client.timeout"):
        load_config(cfg)


@pytest.mark.parametrize("timeout", ["fast", 0, -1, "true"])
def test_load_config_bad_timeout(tmp_path: Path, timeout):
    cfg = write_yaml(
        tmp_path / "config" / "default.yaml",
        f"""
        model: {{ provider: anthropic, name: m }}
        client: {{ timeout: {timeout} }}
        """,
    )
    with pytest.raises(ConfigError):
        load_config(cfg)


def test_load_config_type_error(tmp_path: Path):
    cfg = write_yaml(
        tmp_path / "config" / "default.yaml",
        """
        model: { provider: anthropic, name: m }
        client: { timeout: 2, log_responses: "yes" }   # wrong type
        """,
    )
    with pytest.raises(ConfigError):
        load_config(cfg)


def test_load_config_unknown_provider(tmp_path: Path):
    cfg = write_yaml(
        tmp_path / "config" / "default.yaml",
        """
        model: { provider: mystery, name: m }
        client: { timeout: 2 }
        """,
    )
    with pytest.raises(ConfigError):
        load_config(cfg)


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
