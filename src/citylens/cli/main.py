"""citylens CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from citylens.cli.ask import ask_cmd
from citylens.cli.files import files_cmd
from citylens.cli.history import history_cmd
from citylens.cli.ingest import ingest_cmd
from citylens.cli.remove import remove_cmd
from citylens.cli.serve import serve_cmd
from citylens.logging import configure_logging


def _installed_version() -> str:
    try:
        return importlib.metadata.version("citylens")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"citylens {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="citylens",
    help=(
        "citylens: municipal indicators assistant.\n\n"
        "  citylens ingest   Add spreadsheets, documents and PDFs to the catalog.\n"
        "  citylens ask      Ask a question grounded on every catalog file."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """citylens: municipal indicators assistant."""
    configure_logging(verbose)


app.command("ingest")(ingest_cmd)
app.command("files")(files_cmd)
app.command("remove")(remove_cmd)
app.command("ask")(ask_cmd)
app.command("history")(history_cmd)
app.command("serve")(serve_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed citylens version."""
    typer.echo(f"citylens {_installed_version()}")


if __name__ == "__main__":
    app()
