"""Base extractor interface and the ingestion error taxonomy."""

from __future__ import annotations

from abc import ABC, abstractmethod

from citylens.db.models import ContentKind


class ParseError(ValueError):
    """A file could not be turned into text. Carries the offending file name."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename


class UnsupportedFormatError(ParseError):
    """The file extension is not in the supported set."""

    def __init__(self, filename: str) -> None:
        super().__init__(filename, f"Tipo de arquivo não suportado: {filename}")


class ExtractionError(ParseError):
    """A format-specific extractor failed mid-parse (corrupt, encrypted, malformed)."""

    def __init__(self, filename: str, reason: str = "") -> None:
        message = f"Não foi possível ler o arquivo {filename}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(filename, message)
        self.reason = reason


class BaseExtractor(ABC):
    """Abstract base for all format extractors.

    Subclasses declare the content kinds they handle and implement
    ``extract()``. Blocking parse work is expected to run off the event loop
    (``asyncio.to_thread``) so callers only suspend at those boundaries.
    """

    kinds: frozenset[ContentKind] = frozenset()

    @abstractmethod
    async def extract(self, data: bytes, filename: str) -> str:
        """Return the text representation of *data*.

        Args:
            data: Raw file bytes.
            filename: Original file name (used for header / error labelling).
        """
