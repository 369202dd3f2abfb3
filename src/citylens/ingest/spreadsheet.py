"""Spreadsheet extractor: per-sheet CSV serialisation.

.xlsx workbooks are read with openpyxl; legacy binary .xls workbooks with xlrd.
"""

from __future__ import annotations

import asyncio
import csv
import io
from typing import Any

import openpyxl
import xlrd

from citylens.db.models import ContentKind
from citylens.ingest.base import BaseExtractor


class SpreadsheetExtractor(BaseExtractor):
    """Serialise every sheet of a workbook as CSV, in sheet order.

    Output::

        Conteúdo do arquivo Excel: <name>

        --- Planilha: <sheet> ---
        a,b,c
        ...
    """

    kinds = frozenset({ContentKind.SPREADSHEET})

    async def extract(self, data: bytes, filename: str) -> str:
        return await asyncio.to_thread(self._extract_sync, data, filename)

    @staticmethod
    def _extract_sync(data: bytes, filename: str) -> str:
        if filename.lower().endswith(".xls"):
            sheets = _xls_sheets(data)
        else:
            sheets = _xlsx_sheets(data)
        parts = [f"Conteúdo do arquivo Excel: {filename}\n"]
        for title, rows in sheets:
            parts.append(f"\n--- Planilha: {title} ---\n{sheet_to_csv(rows)}")
        return "".join(parts)


def _xlsx_sheets(data: bytes) -> list[tuple[str, list[list[Any]]]]:
    wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        return [
            (ws.title, [list(row) for row in ws.iter_rows(values_only=True)])
            for ws in wb.worksheets
        ]
    finally:
        wb.close()


def _xls_sheets(data: bytes) -> list[tuple[str, list[list[Any]]]]:
    book = xlrd.open_workbook(file_contents=data)
    try:
        return [
            (sheet.name, [sheet.row_values(r) for r in range(sheet.nrows)])
            for sheet in book.sheets()
        ]
    finally:
        book.release_resources()


def sheet_to_csv(rows: list[list[Any]]) -> str:
    """Render cell rows as comma-separated text. Trailing blank rows are dropped."""
    while rows and all(_is_blank(v) for v in rows[-1]):
        rows.pop()
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for row in rows:
        writer.writerow([_cell_text(v) for v in row])
    return buf.getvalue().rstrip("\n")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
