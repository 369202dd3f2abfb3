"""Plain, tabular-text, and structured-text extractor."""

from __future__ import annotations

from citylens.db.models import ContentKind
from citylens.ingest.base import BaseExtractor


class PlainTextExtractor(BaseExtractor):
    """Decode TXT / CSV / JSON bytes as UTF-8 text, verbatim.

    A leading byte-order mark is dropped and undecodable bytes are replaced,
    matching how browsers decode uploaded text files.
    """

    kinds = frozenset({ContentKind.TEXT, ContentKind.CSV, ContentKind.JSON})

    async def extract(self, data: bytes, filename: str) -> str:
        return decode_text(data)


def decode_text(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    return data.decode("utf-8-sig", errors="replace")
