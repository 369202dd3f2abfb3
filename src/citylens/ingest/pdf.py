"""PDF extractor: page-by-page text via pypdf.

Pages are processed strictly in order: page N is not requested until page
N-1 has finished.
"""

from __future__ import annotations

import asyncio
import io

import pypdf

from citylens.db.models import ContentKind
from citylens.ingest.base import BaseExtractor, ExtractionError


class PdfExtractor(BaseExtractor):
    """Extract per-page text from a PDF.

    Output::

        Conteúdo do arquivo PDF: <name>

        --- Página 1 ---
        <text items joined by single spaces>

    Encrypted documents that cannot be opened with an empty password fail
    with ExtractionError.
    """

    kinds = frozenset({ContentKind.PDF})

    async def extract(self, data: bytes, filename: str) -> str:
        reader = await asyncio.to_thread(pypdf.PdfReader, io.BytesIO(data))
        if reader.is_encrypted and not reader.decrypt(""):
            raise ExtractionError(filename, "o PDF está protegido por senha")

        parts = [f"Conteúdo do arquivo PDF: {filename}\n\n"]
        for number, page in enumerate(reader.pages, start=1):
            page_text = await asyncio.to_thread(page_items_text, page)
            parts.append(f"--- Página {number} ---\n{page_text}\n\n")
        return "".join(parts)


def page_items_text(page: pypdf.PageObject) -> str:
    """Join the page's text items with single spaces."""
    items: list[str] = []

    def _collect(text, cm, tm, font_dict, font_size) -> None:  # noqa: ARG001
        stripped = text.strip()
        if stripped:
            items.append(stripped)

    page.extract_text(visitor_text=_collect)
    return " ".join(items)
