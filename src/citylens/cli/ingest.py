"""citylens ingest: extract files and add them to the catalog.

Format dispatch is by extension only:
  .xlsx / .xls   → spreadsheet (openpyxl; .xls is not readable)
  .csv .txt .json → plain text
  .docx          → python-docx
  .pdf           → pypdf, page by page

Every file in the batch gets its own ✓ / ✗ line; one unreadable file never
stops the rest. Successfully extracted files are stored through the
persistence gateway (remote server first, local store on failure).
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from citylens.cli.common import load_config_or_exit, report_backend
from citylens.cli.errors import err_backend_exhausted, err_file_not_found
from citylens.config import CitylensConfig
from citylens.db.models import CATEGORY_LABELS, Category, FileMetadata, parse_category
from citylens.ingest import IngestOutcome, ingest_batch
from citylens.store import BackendExhaustedError, open_gateway

console = Console()


def ingest_cmd(
    files: Annotated[
        list[Path],
        typer.Argument(help="Files to ingest (CSV, XLSX, DOCX, PDF, TXT, JSON)."),
    ],
    category: Annotated[
        str,
        typer.Option("--category", "-c", help="Department slug or label (default: geral)."),
    ] = Category.GERAL.value,
    description: Annotated[
        str, typer.Option("--description", "-d", help="What the file contains.")
    ] = "",
    source: Annotated[
        str, typer.Option("--source", help="Where the data comes from.")
    ] = "",
    period: Annotated[
        str, typer.Option("--period", help="Period covered by the data.")
    ] = "",
    case_name: Annotated[
        str, typer.Option("--case-name", help="Type/name of the cases counted.")
    ] = "",
) -> None:
    """Ingest one or more files into the catalog."""
    if not _is_known_category(category):
        choices = ", ".join(c.value for c in Category)
        console.print(
            f"[red]Error:[/] Unknown category '{escape(category)}'.\n"
            f"  Choose one of: {choices}"
        )
        raise typer.Exit(1)

    cfg = load_config_or_exit(console)
    metadata = FileMetadata(
        description=description,
        source=source,
        period=period,
        case_name=case_name,
        category=parse_category(category),
    )

    items: list[tuple[str, bytes]] = []
    for path in files:
        if not path.is_file():
            console.print(err_file_not_found(str(path)))
            continue
        items.append((path.name, path.read_bytes()))

    if not items:
        console.print("[yellow]No files to ingest.[/]")
        raise typer.Exit(1)

    try:
        stored = asyncio.run(_ingest(items, metadata, cfg))
    except BackendExhaustedError as exc:
        console.print(err_backend_exhausted(exc, cfg.local.db_path))
        raise typer.Exit(1)

    if stored == 0:
        raise typer.Exit(1)


async def _ingest(
    items: list[tuple[str, bytes]], metadata: FileMetadata, cfg: CitylensConfig
) -> int:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=console,
    ) as prog:
        prog.add_task(f"Extracting {len(items)} file(s)…", total=None)
        outcomes = await ingest_batch(items, metadata)

    gateway = open_gateway(cfg)
    stored = 0
    try:
        for outcome in outcomes:
            if await _store(outcome, gateway):
                stored += 1
        report_backend(console, gateway, cfg)
    finally:
        await gateway.aclose()

    label = CATEGORY_LABELS[metadata.category]
    console.print(f"\n{stored}/{len(outcomes)} file(s) added  |  Category: {label}")
    return stored


async def _store(outcome: IngestOutcome, gateway) -> bool:
    if outcome.file is None:
        console.print(f"  [red]✗[/] {escape(outcome.filename)}: {escape(str(outcome.error))}")
        return False
    record = await gateway.add_file(outcome.file)
    console.print(
        f"  [green]✓[/] {escape(record.name)} "
        f"[dim]({record.kind.value}, {len(record.content):,} chars, id {record.id})[/]"
    )
    return True


def _is_known_category(value: str) -> bool:
    return any(value in (c.value, label) for c, label in CATEGORY_LABELS.items())
