"""Unit tests for opc-shell commands."""

from __future__ import annotations

import json
from typing import List

from opc_shell.clients import ReadEvent
from opc_shell.commands import build_registry
from opc_shell.commands.exit import ExitCommand
from opc_shell.commands.help import FOOTER
from opc_shell.commands.monitor import MonitorCommand
from opc_shell.commands.read import ReadCommand
from opc_shell.commands.write import WriteCommand
from opc_shell.context import ShellContext
from opc_shell.parser import Command, Verb


def test_read_prints_value_and_type(ctx, capsys):
    assert ReadCommand().run(ctx, ["Plant.Tank1.Level"]) == 0
    assert capsys.readouterr().out == "Value: 12.5 | Type: float\n"


def test_read_relative_tag(ctx, capsys):
    ctx.change_node("Plant.Tank1")
    ReadCommand().run(ctx, ["Label"])
    assert capsys.readouterr().out == "Value: north | Type: str\n"


def test_read_json_output(ctx, capsys):
    ctx.json_output = True
    ReadCommand().run(ctx, ["Plant.Tank1.Running"])
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "status": "ok",
        "result": {"tag": "Plant.Tank1.Running", "value": True, "type": "bool"},
    }


def test_write_command_return_codes(ctx):
    cmd = WriteCommand()
    assert cmd.run(ctx, ["Plant.Tank1.Setpoint", "12"]) == 0
    assert cmd.run(ctx, ["Plant.Tank1.Running", "maybe"]) == 1


def test_help_lists_commands_in_order(ctx, capsys):
    registry = build_registry()
    assert registry.run(Command(Verb.HELP), ctx) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Supported commands:"
    assert lines[1] == "  ls: Display the subnodes"
    assert lines[2] == "  cd [tag]: Visit a children node"
    assert "  write [tag[:type]] [value]: Write value on node" in lines
    assert lines[-1] == FOOTER
    assert registry.names() == ["ls", "cd", "read", "write", "root", "up", "monitor", "help", "exit"]


def test_exit_closes_client_and_stops(ctx, fake_client):
    assert ExitCommand().run(ctx, []) == 0
    assert ctx.running is False
    assert fake_client.close_calls == 1


def test_monitor_prints_changes_until_interrupted(fake_client, capsys):
    stops: List[str] = []

    def interrupt_after_one_change() -> None:
        _, callback = fake_client.monitors[0]
        callback(ReadEvent(41), lambda: stops.append("early"))

    ctx = ShellContext(fake_client, wait_for_interrupt=interrupt_after_one_change)
    ctx.change_node("Plant.Tank1")
    assert MonitorCommand().run(ctx, ["Setpoint"]) == 0
    assert fake_client.monitors[0][0] == "Plant.Tank1.Setpoint"
    assert fake_client.stop_calls == 1
    out = capsys.readouterr().out
    assert "Started monitoring. Press Enter to interrupt." in out
    assert "Value changed: 41 | Type: int" in out

    # A late notification cancels the subscription instead of printing.
    fake_client.monitors[0][1](ReadEvent(42), lambda: stops.append("late"))
    assert stops == ["late"]
    assert fake_client.stop_calls == 1
    assert "42" not in capsys.readouterr().out
