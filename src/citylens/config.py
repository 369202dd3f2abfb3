"""citylens configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site, not in this module)
  2. Environment variables  (CITYLENS_API_URL, CITYLENS_DB_PATH, CITYLENS_GENERATION_MODEL)
  3. Per-project citylens.yaml  (current directory)
  4. Global ~/.citylens/config.yaml  (no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".citylens"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "citylens.yaml"

# Key names that look like credentials are forbidden in global config.
# Does NOT match legitimate keys like max_tokens or max_chars_per_file.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(
    ["remote", "local", "context", "generation", "server"]
)


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class RemoteCfg:
    """Remote catalog server (citylens.yaml: remote:)."""

    api_url: str = "http://localhost:3001"
    timeout: float = 10.0


@dataclass
class LocalCfg:
    """Local fallback store (citylens.yaml: local:)."""

    db_path: str = ".citylens.db"


@dataclass
class ContextCfg:
    """Grounding context assembly (citylens.yaml: context:)."""

    max_chars_per_file: int = 150_000


@dataclass
class GenerationCfg:
    """Completion service (citylens.yaml: generation:)."""

    model: str = "gemini/gemini-2.5-flash"
    max_tokens: int = 4096
    temperature: float = 0.2


@dataclass
class ServerCfg:
    """Catalog server started by `citylens serve` (citylens.yaml: server:)."""

    host: str = "127.0.0.1"
    port: int = 3001
    data_file: str = "data/db.json"


@dataclass
class CitylensConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    remote: RemoteCfg = field(default_factory=RemoteCfg)
    local: LocalCfg = field(default_factory=LocalCfg)
    context: ContextCfg = field(default_factory=ContextCfg)
    generation: GenerationCfg = field(default_factory=GenerationCfg)
    server: ServerCfg = field(default_factory=ServerCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' (ignored).",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: CitylensConfig) -> None:
    if not cfg.remote.api_url.startswith(("http://", "https://")):
        raise ConfigError(
            f"remote.api_url must start with http:// or https://, got '{cfg.remote.api_url}'"
        )
    if cfg.remote.timeout <= 0:
        raise ConfigError(f"remote.timeout must be > 0, got {cfg.remote.timeout}")
    if cfg.context.max_chars_per_file < 1:
        raise ConfigError(
            f"context.max_chars_per_file must be >= 1, got {cfg.context.max_chars_per_file}"
        )
    if not 0 < cfg.server.port < 65536:
        raise ConfigError(f"server.port must be in 1..65535, got {cfg.server.port}")


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> CitylensConfig:
    """Build a *CitylensConfig* from a merged raw YAML dict."""
    cfg = CitylensConfig()

    try:
        if "remote" in data:
            r = data["remote"] or {}
            cfg.remote = RemoteCfg(
                api_url=str(r.get("api_url", cfg.remote.api_url)),
                timeout=float(r.get("timeout", cfg.remote.timeout)),
            )

        if "local" in data:
            lo = data["local"] or {}
            cfg.local = LocalCfg(db_path=str(lo.get("db_path", cfg.local.db_path)))

        if "context" in data:
            c = data["context"] or {}
            cfg.context = ContextCfg(
                max_chars_per_file=int(
                    c.get("max_chars_per_file", cfg.context.max_chars_per_file)
                ),
            )

        if "generation" in data:
            g = data["generation"] or {}
            cfg.generation = GenerationCfg(
                model=str(g.get("model", cfg.generation.model)),
                max_tokens=int(g.get("max_tokens", cfg.generation.max_tokens)),
                temperature=float(g.get("temperature", cfg.generation.temperature)),
            )

        if "server" in data:
            s = data["server"] or {}
            cfg.server = ServerCfg(
                host=str(s.get("host", cfg.server.host)),
                port=int(s.get("port", cfg.server.port)),
                data_file=str(s.get("data_file", cfg.server.data_file)),
            )
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: CitylensConfig) -> CitylensConfig:
    """Apply CITYLENS_* environment variable overrides."""
    if url := os.environ.get("CITYLENS_API_URL"):
        cfg.remote.api_url = url
    if db_path := os.environ.get("CITYLENS_DB_PATH"):
        cfg.local.db_path = db_path
    if model := os.environ.get("CITYLENS_GENERATION_MODEL"):
        cfg.generation.model = model
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> CitylensConfig:
    """Load and return a merged *CitylensConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *citylens.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If global config contains API-key-like fields, or a
            value is malformed or out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _apply_env_overrides(_cfg_from_dict(merged))
    _validate(cfg)
    return cfg
