"""Format detection by file name extension.

The extension is the sole authority; file contents are never sniffed.
"""

from __future__ import annotations

from citylens.db.models import ContentKind

_EXTENSION_KINDS: dict[str, ContentKind] = {
    "csv": ContentKind.CSV,
    "xlsx": ContentKind.SPREADSHEET,
    "xls": ContentKind.SPREADSHEET,
    "docx": ContentKind.DOCUMENT,
    "pdf": ContentKind.PDF,
    "txt": ContentKind.TEXT,
    "json": ContentKind.JSON,
}

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(f".{ext}" for ext in _EXTENSION_KINDS)


def detect(filename: str) -> ContentKind:
    """Map *filename* to a ContentKind using the lower-cased suffix after the last dot.

    Names without a dot, or with an unmapped suffix, yield ``ContentKind.UNKNOWN``.
    """
    if "." not in filename:
        return ContentKind.UNKNOWN
    extension = filename.rsplit(".", 1)[1].lower()
    return _EXTENSION_KINDS.get(extension, ContentKind.UNKNOWN)
