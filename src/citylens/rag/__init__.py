"""Grounding context, prompt construction, completion client, response interpretation."""

from citylens.rag.context import build_context
from citylens.rag.interpreter import Interpretation, interpret

__all__ = ["Interpretation", "build_context", "interpret"]
