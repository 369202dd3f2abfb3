"""citylens rich error messages: actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from citylens.cli.errors import err_no_api_key
    console.print(err_no_api_key("gemini"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape


def err_no_api_key(provider: str, env_var: str | None = None) -> str:
    """No API key for *provider*.

    Example:
        No API key for 'gemini'. Set:  export GEMINI_API_KEY=...
    """
    env_var = env_var or f"{provider.upper()}_API_KEY"
    return (
        f"[red]Error:[/] No API key for '{provider}'.\n"
        f"  Set:  export {env_var}=..."
    )


def err_config(exc: Exception) -> str:
    """Config file is invalid or contains a forbidden key."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {escape(str(exc))}\n"
        "  Fix citylens.yaml (or ~/.citylens/config.yaml) and retry."
    )


def err_backend_exhausted(exc: Exception, db_path: str) -> str:
    """Both the remote server and the local store failed."""
    return (
        f"[red]Error:[/] Storage unavailable: {escape(str(exc))}\n"
        f"  The remote server could not be reached and the local store at '{db_path}' failed.\n"
        "  Check that the directory is writable, or start the server:  citylens serve"
    )


def err_file_not_found(path: str) -> str:
    """Input path for ingest does not exist."""
    return (
        f"[red]✗ File not found:[/] '{escape(path)}'\n"
        "  Check the path and retry."
    )


def err_catalog_file_not_found(file_id: str) -> str:
    """No catalog entry with *file_id*."""
    return (
        f"[yellow]File not found:[/] '{escape(file_id)}' is not in the catalog.\n"
        "  Run:  citylens files  to see all file ids."
    )


def err_empty_question() -> str:
    return (
        "[red]Error:[/] The question is empty.\n"
        '  Example:  citylens ask "Qual foi a evolução das matrículas em 2023?"'
    )


def warn_local_fallback(db_path: str) -> str:
    """Shown after a command when the remote server was unreachable."""
    return (
        f"[yellow]⚠[/] Remote server unreachable, using local store '{db_path}'.\n"
        "  Records written now are not visible to other clients of the server."
    )
