"""Content extraction dispatch: one strategy per content kind."""

from __future__ import annotations

import logging

from citylens.db.models import ContentKind
from citylens.ingest.base import BaseExtractor, ExtractionError, ParseError, UnsupportedFormatError
from citylens.ingest.detector import detect
from citylens.ingest.document import DocumentExtractor
from citylens.ingest.pdf import PdfExtractor
from citylens.ingest.plaintext import PlainTextExtractor
from citylens.ingest.spreadsheet import SpreadsheetExtractor

logger = logging.getLogger("citylens.ingest")

_TEXT_KINDS = PlainTextExtractor.kinds


class ContentExtractor:
    """Turn raw file bytes (or already-decoded text) into one UTF-8 text blob.

    Any failure inside a strategy surfaces as ExtractionError carrying the
    file name, chained to the original exception. No caching.
    """

    def __init__(self, extractors: list[BaseExtractor] | None = None) -> None:
        if extractors is None:
            extractors = [
                PlainTextExtractor(),
                SpreadsheetExtractor(),
                DocumentExtractor(),
                PdfExtractor(),
            ]
        self._by_kind: dict[ContentKind, BaseExtractor] = {}
        for extractor in extractors:
            for kind in extractor.kinds:
                self._by_kind[kind] = extractor

    async def extract(self, data: bytes | str, filename: str) -> str:
        """Extract text from *data* according to the kind detected from *filename*.

        Raises:
            UnsupportedFormatError: The extension is not supported.
            ExtractionError: The format-specific extractor failed.
        """
        kind = detect(filename)
        extractor = self._by_kind.get(kind)
        if extractor is None:
            raise UnsupportedFormatError(filename)

        if isinstance(data, str):
            if kind in _TEXT_KINDS:
                return data
            raise ExtractionError(filename, "conteúdo binário esperado")

        logger.debug("Extracting %s as %s (%d bytes)", filename, kind.value, len(data))
        try:
            return await extractor.extract(data, filename)
        except ParseError:
            raise
        except Exception as exc:
            raise ExtractionError(filename, str(exc) or type(exc).__name__) from exc


async def extract(data: bytes | str, filename: str) -> str:
    """Module-level convenience wrapper around a default ContentExtractor."""
    return await ContentExtractor().extract(data, filename)


__all__ = ["ContentExtractor", "extract"]
