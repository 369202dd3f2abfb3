"""citylens remove: delete a file from the catalog.

Usage:
  citylens remove 3f2c...
  citylens remove 3f2c... --yes
"""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from citylens.cli.common import load_config_or_exit, report_backend
from citylens.cli.errors import err_backend_exhausted, err_catalog_file_not_found
from citylens.config import CitylensConfig
from citylens.store import BackendExhaustedError, PersistenceGateway, open_gateway

console = Console()


def remove_cmd(
    file_id: Annotated[str, typer.Argument(help="Id of the file to remove (see: citylens files).")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove a file from the catalog."""
    cfg = load_config_or_exit(console)
    try:
        removed = asyncio.run(_remove(file_id, yes, cfg))
    except BackendExhaustedError as exc:
        console.print(err_backend_exhausted(exc, cfg.local.db_path))
        raise typer.Exit(1)

    if removed is None:
        console.print(err_catalog_file_not_found(file_id))
    elif removed:
        console.print(f"\n[green]✓[/] Removed: {escape(file_id)}")
    else:
        console.print("[dim]Cancelled.[/]")


async def _remove(file_id: str, yes: bool, cfg: CitylensConfig) -> bool | None:
    """Return None if unknown, False if cancelled, True once deleted."""
    gateway: PersistenceGateway = open_gateway(cfg)
    try:
        files = await gateway.list_files()
        match = next((f for f in files if f.id == file_id), None)
        if match is None:
            return None

        console.print(f"\nRemove file: [bold]{escape(match.name)}[/]")
        console.print(f"  Type: {match.kind.value}  |  Chars: {len(match.content):,}")
        if not yes and not typer.confirm("Confirm removal?", default=False):
            return False

        await gateway.delete_file(file_id)
        report_backend(console, gateway, cfg)
        return True
    finally:
        await gateway.aclose()
