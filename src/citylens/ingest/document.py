"""Word-processor extractor: visible paragraph text via python-docx."""

from __future__ import annotations

import asyncio
import io

import docx

from citylens.db.models import ContentKind
from citylens.ingest.base import BaseExtractor


class DocumentExtractor(BaseExtractor):
    """Extract run text from a DOCX file.

    Body paragraphs come first, then the paragraphs inside table cells.
    Formatting, images and other embedded objects are ignored. Paragraphs are
    separated by a blank line.
    """

    kinds = frozenset({ContentKind.DOCUMENT})

    async def extract(self, data: bytes, filename: str) -> str:
        text = await asyncio.to_thread(self._extract_text, data)
        return f"Conteúdo do arquivo DOCX: {filename}\n\n{text}"

    @staticmethod
    def _extract_text(data: bytes) -> str:
        document = docx.Document(io.BytesIO(data))
        paragraphs = [p.text for p in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                for cell in row.cells:
                    paragraphs.extend(p.text for p in cell.paragraphs)
        return "\n\n".join(p for p in paragraphs if p.strip())
