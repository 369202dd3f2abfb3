"""Tests for the citylens config loader."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest
import yaml

from citylens.config import ConfigError, load_config


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    for var in ("CITYLENS_API_URL", "CITYLENS_DB_PATH", "CITYLENS_GENERATION_MODEL"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_yaml(path: Path, data: dict) -> None:
    path.write_text(yaml.dump(data), encoding="utf-8")


def _load(tmp_path: Path, global_cfg: Path | None = None):
    return load_config(
        project_dir=tmp_path,
        global_config_path=global_cfg or tmp_path / "nonexistent" / "config.yaml",
    )


# ---------------------------------------------------------------------------
# Defaults (no config files present)
# ---------------------------------------------------------------------------


def test_load_config_defaults_no_files(tmp_path: Path) -> None:
    """No config files → all hardcoded defaults."""
    cfg = _load(tmp_path)

    assert cfg.remote.api_url == "http://localhost:3001"
    assert cfg.remote.timeout == 10.0
    assert cfg.local.db_path == ".citylens.db"
    assert cfg.context.max_chars_per_file == 150_000
    assert cfg.generation.model == "gemini/gemini-2.5-flash"
    assert cfg.generation.max_tokens == 4096
    assert cfg.generation.temperature == pytest.approx(0.2)
    assert cfg.server.port == 3001
    assert cfg.server.data_file == "data/db.json"


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


def test_load_config_global_overrides_defaults(tmp_path: Path) -> None:
    global_cfg = tmp_path / "config.yaml"
    _write_yaml(global_cfg, {"generation": {"model": "openai/gpt-4o"}})

    cfg = _load(tmp_path, global_cfg)
    assert cfg.generation.model == "openai/gpt-4o"
    # Other defaults unchanged
    assert cfg.generation.max_tokens == 4096


def test_load_config_global_comments_only(tmp_path: Path) -> None:
    global_cfg = tmp_path / "config.yaml"
    global_cfg.write_text("# nothing here\n", encoding="utf-8")
    assert _load(tmp_path, global_cfg).generation.model == "gemini/gemini-2.5-flash"


def test_global_config_api_key_forbidden(tmp_path: Path) -> None:
    global_cfg = tmp_path / "config.yaml"
    _write_yaml(global_cfg, {"generation": {"api_key": "secret"}})

    with pytest.raises(ConfigError, match="generation.api_key"):
        _load(tmp_path, global_cfg)


def test_max_tokens_not_mistaken_for_a_secret(tmp_path: Path) -> None:
    global_cfg = tmp_path / "config.yaml"
    _write_yaml(global_cfg, {"generation": {"max_tokens": 1024}})
    assert _load(tmp_path, global_cfg).generation.max_tokens == 1024


# ---------------------------------------------------------------------------
# Per-project config
# ---------------------------------------------------------------------------


def test_load_config_project_overrides_global(tmp_path: Path) -> None:
    global_cfg = tmp_path / "global.yaml"
    _write_yaml(global_cfg, {"remote": {"api_url": "http://global:3001", "timeout": 30}})
    _write_yaml(tmp_path / "citylens.yaml", {"remote": {"api_url": "https://prefeitura.example"}})

    cfg = _load(tmp_path, global_cfg)
    assert cfg.remote.api_url == "https://prefeitura.example"
    assert cfg.remote.timeout == 30.0  # global value preserved


def test_load_config_all_sections(tmp_path: Path) -> None:
    _write_yaml(
        tmp_path / "citylens.yaml",
        {
            "local": {"db_path": "state/local.db"},
            "context": {"max_chars_per_file": 5000},
            "server": {"host": "0.0.0.0", "port": 8080, "data_file": "srv.json"},
        },
    )
    cfg = _load(tmp_path)
    assert cfg.local.db_path == "state/local.db"
    assert cfg.context.max_chars_per_file == 5000
    assert (cfg.server.host, cfg.server.port, cfg.server.data_file) == ("0.0.0.0", 8080, "srv.json")


def test_unknown_section_warns(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "citylens.yaml", {"embedding": {"model": "x"}})
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        _load(tmp_path)
    assert any("embedding" in str(w.message) for w in caught)


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def test_env_overrides_files(tmp_path: Path, monkeypatch) -> None:
    _write_yaml(tmp_path / "citylens.yaml", {"remote": {"api_url": "http://from-file"}})
    monkeypatch.setenv("CITYLENS_API_URL", "http://from-env:3001")
    monkeypatch.setenv("CITYLENS_DB_PATH", "/var/lib/citylens.db")
    monkeypatch.setenv("CITYLENS_GENERATION_MODEL", "ollama/llama3")

    cfg = _load(tmp_path)
    assert cfg.remote.api_url == "http://from-env:3001"
    assert cfg.local.db_path == "/var/lib/citylens.db"
    assert cfg.generation.model == "ollama/llama3"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "data",
    [
        {"remote": {"api_url": "localhost:3001"}},
        {"remote": {"timeout": 0}},
        {"context": {"max_chars_per_file": 0}},
        {"server": {"port": 70000}},
        {"generation": {"max_tokens": "many"}},
    ],
)
def test_invalid_values_raise(tmp_path: Path, data: dict) -> None:
    _write_yaml(tmp_path / "citylens.yaml", data)
    with pytest.raises(ConfigError):
        _load(tmp_path)


def test_config_error_is_value_error() -> None:
    assert issubclass(ConfigError, ValueError)
