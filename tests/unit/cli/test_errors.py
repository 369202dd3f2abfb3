"""Tests for citylens rich error messages."""

from __future__ import annotations

from citylens.cli.errors import (
    err_backend_exhausted,
    err_catalog_file_not_found,
    err_config,
    err_empty_question,
    err_file_not_found,
    err_no_api_key,
    warn_local_fallback,
)
from citylens.config import ConfigError


def _has_action(msg: str) -> bool:
    """Every error must contain an actionable instruction."""
    lower = msg.lower()
    return any(kw in lower for kw in ["run:", "set:", "export ", "citylens ", "check", "fix", "example:"])


def test_err_no_api_key_contains_provider_and_env_var() -> None:
    msg = err_no_api_key("gemini", "GEMINI_API_KEY")
    assert "gemini" in msg
    assert "export GEMINI_API_KEY=" in msg


def test_err_no_api_key_unknown_provider_fallback() -> None:
    assert "MYPROVIDER_API_KEY" in err_no_api_key("myprovider")


def test_err_config_escapes_markup() -> None:
    msg = err_config(ConfigError("bad [value]"))
    assert "\\[value]" in msg


def test_err_backend_exhausted_mentions_db_path() -> None:
    msg = err_backend_exhausted(OSError("disk full"), ".citylens.db")
    assert ".citylens.db" in msg
    assert "disk full" in msg


def test_warn_local_fallback_mentions_db_path() -> None:
    assert "'.citylens.db'" in warn_local_fallback(".citylens.db")


def test_all_errors_have_action() -> None:
    for msg in (
        err_no_api_key("gemini"),
        err_config(ConfigError("x")),
        err_backend_exhausted(OSError("x"), "db"),
        err_file_not_found("a.csv"),
        err_catalog_file_not_found("id-1"),
        err_empty_question(),
    ):
        assert _has_action(msg), msg
