"""Batch ingestion: files in, UploadedFile records (or per-file errors) out.

Files in one batch are extracted sequentially; each file gets exactly one
outcome, in input order, and a failing file never aborts the rest.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from citylens.db.models import FileMetadata, UploadedFile, new_id, now_ms
from citylens.ingest.base import ParseError
from citylens.ingest.detector import detect
from citylens.ingest.extractor import ContentExtractor


@dataclass
class IngestOutcome:
    filename: str
    file: UploadedFile | None = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.file is not None


async def ingest_file(
    data: bytes | str,
    filename: str,
    metadata: FileMetadata | None = None,
    extractor: ContentExtractor | None = None,
) -> UploadedFile:
    """Extract *data* and wrap it in a new UploadedFile record.

    Raises:
        ParseError: Unsupported extension or extraction failure.
    """
    extractor = extractor or ContentExtractor()
    content = await extractor.extract(data, filename)
    return UploadedFile(
        id=new_id(),
        name=filename,
        kind=detect(filename),
        content=content,
        timestamp=now_ms(),
        metadata=metadata or FileMetadata(),
    )


async def ingest_batch(
    items: Iterable[tuple[str, bytes | str]],
    metadata: FileMetadata | None = None,
    extractor: ContentExtractor | None = None,
) -> list[IngestOutcome]:
    """Ingest ``(filename, data)`` pairs one after another.

    Args:
        items: Pairs of file name and raw bytes (or decoded text).
        metadata: Metadata applied to every successfully ingested file.
        extractor: Extractor to use (a default one is built if omitted).

    Returns:
        One IngestOutcome per input, in input order.
    """
    extractor = extractor or ContentExtractor()
    outcomes: list[IngestOutcome] = []
    for filename, data in items:
        try:
            record = await ingest_file(data, filename, metadata, extractor)
        except ParseError as exc:
            outcomes.append(IngestOutcome(filename=filename, error=exc))
            continue
        outcomes.append(IngestOutcome(filename=filename, file=record))
    return outcomes
