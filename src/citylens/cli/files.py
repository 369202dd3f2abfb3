"""citylens files: list the catalog."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from citylens.cli.common import load_config_or_exit, report_backend
from citylens.cli.errors import err_backend_exhausted
from citylens.config import CitylensConfig
from citylens.db.models import CATEGORY_LABELS, UploadedFile, parse_category
from citylens.store import BackendExhaustedError, open_gateway

console = Console()


def files_cmd(
    category: Annotated[
        str | None,
        typer.Option("--category", "-c", help="Only show files of this department."),
    ] = None,
) -> None:
    """List the files in the catalog."""
    cfg = load_config_or_exit(console)
    try:
        files = asyncio.run(_list(cfg))
    except BackendExhaustedError as exc:
        console.print(err_backend_exhausted(exc, cfg.local.db_path))
        raise typer.Exit(1)

    if category is not None:
        wanted = parse_category(category)
        files = [f for f in files if f.metadata.category is wanted]

    if not files:
        console.print("[dim]No files in the catalog.[/]\n  Run:  citylens ingest FILE...")
        return

    console.print(_files_table(files))


async def _list(cfg: CitylensConfig) -> list[UploadedFile]:
    gateway = open_gateway(cfg)
    try:
        files = await gateway.list_files()
        report_backend(console, gateway, cfg)
    finally:
        await gateway.aclose()
    return files


def _files_table(files: list[UploadedFile]) -> Table:
    table = Table(title=f"Catalog ({len(files)} files)")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Chars", justify="right")
    table.add_column("Added")
    for f in files:
        added = datetime.fromtimestamp(f.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        table.add_row(
            f.id,
            escape(f.name),
            f.kind.value,
            CATEGORY_LABELS[f.metadata.category],
            f"{len(f.content):,}",
            added,
        )
    return table
