"""Tests for domain models and their wire format."""

from __future__ import annotations

from citylens.db.models import (
    CATEGORY_LABELS,
    Category,
    ChartData,
    ChartKind,
    ContentKind,
    Message,
    Role,
    UploadedFile,
    parse_category,
)


def test_every_category_has_a_label():
    assert set(CATEGORY_LABELS) == set(Category)


def test_parse_category_accepts_slug_and_label():
    assert parse_category("saude") is Category.SAUDE
    assert parse_category("Saúde") is Category.SAUDE
    assert parse_category("Esporte cultura e lazer") is Category.ESPORTE_CULTURA_LAZER


def test_parse_category_unknown_or_missing_is_geral():
    assert parse_category("Turismo") is Category.GERAL
    assert parse_category(None) is Category.GERAL
    assert parse_category("") is Category.GERAL


def test_uploaded_file_wire_keys(make_file):
    data = make_file(case_name="Dengue").to_dict()
    assert data["type"] == "csv"
    assert data["caseName"] == "Dengue"
    assert data["category"] == "saude"
    assert "case_name" not in data


def test_uploaded_file_from_dict_defaults():
    f = UploadedFile.from_dict({"id": "x", "name": "a.bin", "type": "weird"})
    assert f.kind is ContentKind.UNKNOWN
    assert f.content == ""
    assert f.metadata.category is Category.GERAL


def test_uploaded_file_from_dict_inverts_to_dict(make_file):
    original = make_file(description="d", source="s", period="p", case_name="c")
    assert UploadedFile.from_dict(original.to_dict()) == original


def test_message_to_dict_omits_pending_and_missing_chart():
    data = Message(id="m", role=Role.USER, text="oi", timestamp=1, pending=True).to_dict()
    assert data == {"id": "m", "role": "user", "text": "oi", "timestamp": 1}


def test_message_from_dict_maps_model_role_to_assistant():
    msg = Message.from_dict({"id": "m", "role": "model", "text": "ok", "timestamp": 5})
    assert msg.role is Role.ASSISTANT


def test_message_from_dict_reads_chart_data():
    msg = Message.from_dict(
        {
            "id": "m",
            "role": "assistant",
            "text": "ok",
            "timestamp": 5,
            "chartData": {"type": "line", "title": "T", "data": [{"label": "a", "value": 1}]},
        }
    )
    assert msg.chart is not None
    assert msg.chart.kind is ChartKind.LINE


def test_chart_data_keeps_unrecognised_kind_as_string():
    chart = ChartData.from_dict({"type": "radar", "title": "T", "data": "not a list"})
    assert chart.kind == "radar"
    assert chart.data == []
    assert chart.to_dict()["type"] == "radar"


def test_chart_data_optional_keys_only_when_set():
    out = ChartData(kind=ChartKind.PIE, title="T").to_dict()
    assert set(out) == {"type", "title", "data"}
