"""Tests for PlainTextExtractor."""

from __future__ import annotations

import asyncio

from citylens.db.models import ContentKind
from citylens.ingest.plaintext import PlainTextExtractor, decode_text


def test_kinds():
    assert PlainTextExtractor.kinds == {ContentKind.TEXT, ContentKind.CSV, ContentKind.JSON}


def test_extract_returns_text_verbatim():
    data = "municipio,casos\nSão Gonçalo,3\n".encode("utf-8")
    result = asyncio.run(PlainTextExtractor().extract(data, "casos.csv"))
    assert result == "municipio,casos\nSão Gonçalo,3\n"


def test_extract_drops_bom():
    data = b"\xef\xbb\xbfano,total"
    assert asyncio.run(PlainTextExtractor().extract(data, "a.csv")) == "ano,total"


def test_decode_replaces_invalid_bytes():
    assert decode_text(b"ok\xff") == "ok�"


def test_decode_passes_str_through():
    assert decode_text("já decodificado") == "já decodificado"
