"""Helpers shared by the citylens commands."""

from __future__ import annotations

import typer
from rich.console import Console

from citylens.cli.errors import err_config, warn_local_fallback
from citylens.config import CitylensConfig, ConfigError, load_config
from citylens.store import Backend, PersistenceGateway


def load_config_or_exit(console: Console) -> CitylensConfig:
    """Load config; print an actionable error and exit 1 if it is invalid."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(exc))
        raise typer.Exit(1)


def report_backend(console: Console, gateway: PersistenceGateway, cfg: CitylensConfig) -> None:
    """Print which backend served the command."""
    if gateway.current_backend() is Backend.LOCAL:
        console.print(warn_local_fallback(cfg.local.db_path))
    else:
        console.print(f"[dim]Storage: remote ({cfg.remote.api_url})[/]")
