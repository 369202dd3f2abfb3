"""citylens ask: one conversation turn grounded on the catalog.

The whole catalog (metadata + extracted content, capped per file) is sent as
context with the stored transcript. The answer is printed as markdown; when
the model returns a chart, its data is shown as a table.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from citylens.chat.conversation import ConversationService
from citylens.cli.common import load_config_or_exit, report_backend
from citylens.cli.errors import err_backend_exhausted, err_empty_question, err_no_api_key
from citylens.config import CitylensConfig
from citylens.db.models import ChartData, ChartKind, Message
from citylens.rag.llm_client import (
    LiteLLMCompletion,
    api_key_env,
    provider_of,
    validate_api_key,
)
from citylens.store import BackendExhaustedError, open_gateway

console = Console()


def ask_cmd(
    question: Annotated[str, typer.Argument(help="Question about the loaded indicators.")],
) -> None:
    """Ask a question about the catalog."""
    if not question.strip():
        console.print(err_empty_question())
        raise typer.Exit(1)

    cfg = load_config_or_exit(console)

    # ---- API key validation ----
    try:
        validate_api_key(cfg.generation.model)
    except EnvironmentError:
        model = cfg.generation.model
        console.print(err_no_api_key(provider_of(model), api_key_env(model)))
        raise typer.Exit(1)

    try:
        reply = asyncio.run(_ask(question, cfg))
    except BackendExhaustedError as exc:
        console.print(err_backend_exhausted(exc, cfg.local.db_path))
        raise typer.Exit(1)

    console.print(Markdown(reply.text))
    if reply.chart is not None:
        console.print(chart_table(reply.chart))


async def _ask(question: str, cfg: CitylensConfig) -> Message:
    gateway = open_gateway(cfg)
    completion = LiteLLMCompletion(
        model=cfg.generation.model,
        max_tokens=cfg.generation.max_tokens,
        temperature=cfg.generation.temperature,
    )
    service = ConversationService(gateway, completion, cfg.context.max_chars_per_file)
    try:
        await service.load_transcript()
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console,
        ) as prog:
            prog.add_task(f"Analysing with {cfg.generation.model}…", total=None)
            reply = await service.ask(question)
        report_backend(console, gateway, cfg)
    finally:
        await gateway.aclose()
    return reply


def chart_table(chart: ChartData) -> Table:
    """Render a chart payload as a table: one row per data point."""
    kind = chart.kind.value if isinstance(chart.kind, ChartKind) else chart.kind
    table = Table(title=f"{chart.title} [dim]({kind})[/]", caption=chart.description)
    x_key = chart.x_axis_key or "label"
    keys = chart.data_keys or _series_keys(chart.data, x_key)
    table.add_column(x_key, style="bold")
    for key in keys:
        table.add_column(key, justify="right")
    for row in chart.data:
        table.add_row(str(row.get(x_key, "")), *(str(row.get(k, "")) for k in keys))
    return table


def _series_keys(rows: list[dict], x_key: str) -> list[str]:
    keys: list[str] = []
    for row in rows:
        for key in row:
            if key != x_key and key not in keys:
                keys.append(key)
    return keys

