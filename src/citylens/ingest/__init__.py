"""Ingest pipeline: format detection, text extraction, batch ingestion."""

from citylens.ingest.base import BaseExtractor, ExtractionError, ParseError, UnsupportedFormatError
from citylens.ingest.detector import SUPPORTED_EXTENSIONS, detect
from citylens.ingest.document import DocumentExtractor
from citylens.ingest.extractor import ContentExtractor
from citylens.ingest.pdf import PdfExtractor
from citylens.ingest.pipeline import IngestOutcome, ingest_batch, ingest_file
from citylens.ingest.plaintext import PlainTextExtractor
from citylens.ingest.spreadsheet import SpreadsheetExtractor

__all__ = [
    "BaseExtractor",
    "ContentExtractor",
    "DocumentExtractor",
    "ExtractionError",
    "IngestOutcome",
    "ParseError",
    "PdfExtractor",
    "PlainTextExtractor",
    "SUPPORTED_EXTENSIONS",
    "SpreadsheetExtractor",
    "UnsupportedFormatError",
    "detect",
    "ingest_batch",
    "ingest_file",
]
