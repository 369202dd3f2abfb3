"""citylens: municipal indicators assistant: file catalog, grounded chat, charts."""

__version__ = "0.1.0"
