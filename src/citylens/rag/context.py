"""Grounding context: the catalog rendered as delimited text blocks.

Each file becomes one block (header, metadata, truncated content, footer);
blocks are joined by a blank line in catalog order. Content longer than the
per-file budget is cut at exactly ``max_chars`` characters, without notice.
"""

from __future__ import annotations

from collections.abc import Iterable

from citylens.db.models import CATEGORY_LABELS, UploadedFile

DEFAULT_MAX_CHARS = 150_000
NOT_INFORMED = "Não informado"


def build_context(catalog: Iterable[UploadedFile], max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Render *catalog* as grounding text for the completion service.

    Args:
        catalog: Files in catalog order.
        max_chars: Per-file content budget in characters.

    Returns:
        The concatenated blocks, or an empty string for an empty catalog.
    """
    if max_chars < 0:
        raise ValueError("max_chars must be >= 0")
    return "\n\n".join(file_block(f, max_chars) for f in catalog)


def file_block(file: UploadedFile, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    meta = file.metadata
    return (
        f"--- INÍCIO DO ARQUIVO: {file.name} ---\n"
        "METADADOS:\n"
        f"- Categoria/Setor: {CATEGORY_LABELS[meta.category]}\n"
        f"- Descrição do Arquivo: {_or_placeholder(meta.description)}\n"
        f"- Fonte dos Dados: {_or_placeholder(meta.source)}\n"
        f"- Período dos Dados: {_or_placeholder(meta.period)}\n"
        f"- Tipo/Nome dos Casos: {_or_placeholder(meta.case_name)}\n"
        f"- Tipo de Arquivo: {file.kind.value}\n"
        "\n"
        "CONTEÚDO:\n"
        f"{file.content[:max_chars]}\n"
        f"--- FIM DO ARQUIVO: {file.name} ---"
    )


def _or_placeholder(value: str) -> str:
    return value.strip() or NOT_INFORMED
