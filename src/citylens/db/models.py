"""Domain models shared by the ingest, store, and rag layers.

Wire format (remote API, JSON) uses the camelCase keys of the catalog server;
``to_dict()`` / ``from_dict()`` convert between the two representations.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ContentKind(str, Enum):
    """Normalised category of a file's contents, derived from its extension."""

    SPREADSHEET = "xlsx"
    CSV = "csv"
    DOCUMENT = "docx"
    PDF = "pdf"
    TEXT = "txt"
    JSON = "json"
    UNKNOWN = "unknown"


class Category(str, Enum):
    """Municipal department a file belongs to."""

    FINANCAS = "financas"
    EDUCACAO = "educacao"
    DESENVOLVIMENTO_SOCIAL = "desenvolvimento_social"
    INFRAESTRUTURA = "infraestrutura"
    PLANEJAMENTO = "planejamento"
    ESPORTE_CULTURA_LAZER = "esporte_cultura_lazer"
    SAUDE = "saude"
    GABINETE = "gabinete"
    GERAL = "geral"


# Display labels. The enum values are the stored/wire values.
CATEGORY_LABELS: dict[Category, str] = {
    Category.FINANCAS: "Finanças",
    Category.EDUCACAO: "Educação",
    Category.DESENVOLVIMENTO_SOCIAL: "Desenvolvimento Social",
    Category.INFRAESTRUTURA: "Infraestrutura",
    Category.PLANEJAMENTO: "Planejamento",
    Category.ESPORTE_CULTURA_LAZER: "Esporte cultura e lazer",
    Category.SAUDE: "Saúde",
    Category.GABINETE: "Gabinete",
    Category.GERAL: "Geral",
}


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def parse_category(value: Any) -> Category:
    """Accept an enum value or a display label; unknown values map to GERAL."""
    if isinstance(value, Category):
        return value
    text = str(value or "").strip()
    for category, label in CATEGORY_LABELS.items():
        if text == category.value or text == label:
            return category
    return Category.GERAL


@dataclass(frozen=True)
class FileMetadata:
    """Operator-supplied description of an uploaded file. Empty string = not informed."""

    description: str = ""
    source: str = ""
    period: str = ""
    case_name: str = ""
    category: Category = Category.GERAL


@dataclass(frozen=True)
class UploadedFile:
    id: str
    name: str
    kind: ContentKind
    content: str
    timestamp: int
    metadata: FileMetadata = field(default_factory=FileMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind.value,
            "content": self.content,
            "timestamp": self.timestamp,
            "description": self.metadata.description,
            "source": self.metadata.source,
            "period": self.metadata.period,
            "caseName": self.metadata.case_name,
            "category": self.metadata.category.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UploadedFile:
        try:
            kind = ContentKind(data.get("type") or ContentKind.UNKNOWN.value)
        except ValueError:
            kind = ContentKind.UNKNOWN
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            kind=kind,
            content=str(data.get("content") or ""),
            timestamp=int(data.get("timestamp") or 0),
            metadata=FileMetadata(
                description=str(data.get("description") or ""),
                source=str(data.get("source") or ""),
                period=str(data.get("period") or ""),
                case_name=str(data.get("caseName") or ""),
                category=parse_category(data.get("category")),
            ),
        )


@dataclass
class ChartData:
    """Chart payload attached to an assistant message.

    Rows are caller-defined mappings (``label`` plus one key per series);
    ``kind`` holds a ChartKind when recognised, otherwise the raw string.
    """

    kind: ChartKind | str
    title: str
    data: list[dict[str, Any]] = field(default_factory=list)
    description: str | None = None
    data_keys: list[str] | None = None
    x_axis_key: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": self.kind.value if isinstance(self.kind, ChartKind) else self.kind,
            "title": self.title,
            "data": self.data,
        }
        if self.description is not None:
            out["description"] = self.description
        if self.data_keys is not None:
            out["dataKeys"] = self.data_keys
        if self.x_axis_key is not None:
            out["xAxisKey"] = self.x_axis_key
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChartData:
        raw_kind = str(data.get("type") or "")
        try:
            kind: ChartKind | str = ChartKind(raw_kind)
        except ValueError:
            kind = raw_kind
        rows = data.get("data")
        return cls(
            kind=kind,
            title=str(data.get("title") or ""),
            data=list(rows) if isinstance(rows, list) else [],
            description=data.get("description"),
            data_keys=data.get("dataKeys"),
            x_axis_key=data.get("xAxisKey"),
        )


@dataclass(frozen=True)
class Message:
    id: str
    role: Role
    text: str
    timestamp: int
    pending: bool = False  # transient; never persisted
    chart: ChartData | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "role": self.role.value,
            "text": self.text,
            "timestamp": self.timestamp,
        }
        if self.chart is not None:
            out["chartData"] = self.chart.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        role_value = data.get("role")
        # Older transcripts label the assistant as "model".
        role = Role.ASSISTANT if role_value in ("assistant", "model") else Role.USER
        chart = data.get("chartData")
        return cls(
            id=str(data["id"]),
            role=role,
            text=str(data.get("text") or ""),
            timestamp=int(data.get("timestamp") or 0),
            chart=ChartData.from_dict(chart) if isinstance(chart, dict) else None,
        )
