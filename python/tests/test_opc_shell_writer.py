"""Write coercion tests for opc-shell."""

from __future__ import annotations

import json

import pytest

from opc_shell.clients import ClientError
from opc_shell.values import Kind, TagFormatError
from opc_shell.writer import coerce, infer_kind, split_type_hint, write


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Plant.Tank1.Level:i32", ("Plant.Tank1.Level", "i32")),
        ("ns:Tag:f", ("ns:Tag", "f")),
        (":f", (":f", None)),
        ("Tag:", ("Tag:", None)),
        ("Tag", ("Tag", None)),
    ],
)
def test_split_type_hint(raw, expected):
    assert split_type_hint(raw) == expected


def test_integer_kind_switches_to_single_for_decimal_text():
    assert coerce("3.5", Kind.INT32) == (Kind.SINGLE, 3.5)
    assert coerce("3,5", Kind.UINT16) == (Kind.SINGLE, 3.5)
    assert coerce("42", Kind.INT32) == (Kind.INT32, 42)


def test_integer_kind_falls_back_to_double_beyond_single_range():
    assert coerce("1.0e39", Kind.INT64) == (Kind.DOUBLE, 1.0e39)


def test_byte_kinds_are_not_softened():
    with pytest.raises(TagFormatError):
        coerce("3.5", Kind.BYTE)


def test_hinted_write_uses_hint(ctx, fake_client, capsys):
    typed = write(ctx, "Plant.Tank1.Setpoint:i16", "42")
    assert typed is not None
    assert fake_client.writes == [("Plant.Tank1.Setpoint", 42, Kind.INT16)]
    assert "Written: Plant.Tank1.Setpoint = 42 (Int16)" in capsys.readouterr().out


def test_hinted_write_is_strict(ctx, fake_client, capsys):
    assert write(ctx, "Plant.Tank1.Setpoint:i32", "3.5") is None
    assert fake_client.writes == []
    assert "Write error (hint):" in capsys.readouterr().out


def test_unknown_hint_is_reported(ctx, fake_client, capsys):
    assert write(ctx, "Plant.Tank1.Setpoint:quux", "1") is None
    assert fake_client.writes == []
    assert capsys.readouterr().out.strip() == "Write error (hint): Unknown type hint: quux"


def test_bad_boolean_hint_value(ctx, capsys):
    write(ctx, "Plant.Tank1.Running:bool", "maybe")
    assert "Write error (hint): Invalid boolean value: maybe" in capsys.readouterr().out


def test_reported_integer_type_accepts_decimal_text(ctx, fake_client):
    typed = write(ctx, "Plant.Tank1.Setpoint", "3.5")
    assert typed is not None and typed.kind is Kind.SINGLE
    assert fake_client.writes == [("Plant.Tank1.Setpoint", 3.5, Kind.SINGLE)]


def test_reported_double_accepts_comma(ctx, fake_client):
    write(ctx, "Plant.Tank1.Level", "2,5")
    assert fake_client.writes == [("Plant.Tank1.Level", 2.5, Kind.DOUBLE)]


def test_runtime_value_decides_when_type_unknown(ctx, fake_client):
    write(ctx, "Plant.Tank1.Label", "south")
    write(ctx, "Plant.Pump", "5")
    write(ctx, "Plant.Pump", "5.5")
    assert fake_client.writes == [
        ("Plant.Tank1.Label", "south", Kind.STRING),
        ("Plant.Pump", 5, Kind.INT32),
        ("Plant.Pump", 5.5, Kind.SINGLE),
    ]


def test_single_is_last_resort(ctx, fake_client, capsys):
    assert infer_kind(ctx, "Plant.Tank1.Spare") is Kind.SINGLE
    write(ctx, "Plant.Tank1.Spare", "7")
    assert fake_client.writes == [("Plant.Tank1.Spare", 7.0, Kind.SINGLE)]
    assert "Written: Plant.Tank1.Spare = 7.0 (Single)" in capsys.readouterr().out


def test_relative_tag_is_resolved(ctx, fake_client):
    ctx.change_node("Plant")
    ctx.change_node("Tank1")
    write(ctx, "Setpoint", "10")
    write(ctx, "Setpoint:u16", "11")
    assert fake_client.writes == [
        ("Plant.Tank1.Setpoint", 10, Kind.INT32),
        ("Plant.Tank1.Setpoint", 11, Kind.UINT16),
    ]


def test_client_write_failure_is_reported(ctx, fake_client, capsys):
    fake_client.write_error = ClientError("Write to Plant.Tank1.Level failed: Denied")
    assert write(ctx, "Plant.Tank1.Level", "1.0") is None
    assert "Write error: Write to Plant.Tank1.Level failed: Denied" in capsys.readouterr().out


def test_json_error_payload(ctx, capsys):
    ctx.json_output = True
    write(ctx, "Plant.Tank1.Level", "abc")
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "error"
    assert payload["error"].startswith("Write error: Invalid numeric value for Double")
    assert payload["details"] == {"tag": "Plant.Tank1.Level"}
