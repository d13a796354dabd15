"""REPL loop tests for opc-shell."""

from __future__ import annotations

from typing import List

import pytest

from opc_shell.commands import build_registry
from opc_shell.repl import ShellREPL


def _feed(monkeypatch, lines: List[str]) -> List[str]:
    prompts: List[str] = []
    pending = list(lines)

    def fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        if not pending:
            raise EOFError
        return pending.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


def test_fallback_loop_runs_until_exit(ctx, fake_client, monkeypatch, capsys):
    prompts = _feed(monkeypatch, ["cd Plant", "ls", "exit", "ls"])
    repl = ShellREPL(ctx, build_registry(), interactive=False)
    assert repl.run() == 0
    assert prompts == ["Root: ", "Plant: ", "Plant: "]
    assert "Tank1\nPump\n" in capsys.readouterr().out
    assert fake_client.close_calls == 1


def test_fallback_loop_ends_on_eof(ctx, monkeypatch):
    _feed(monkeypatch, [])
    repl = ShellREPL(ctx, build_registry(), interactive=False)
    assert repl.run() == 0
    assert ctx.running is True


def test_bad_arguments_show_help(ctx, capsys):
    repl = ShellREPL(ctx, build_registry(), interactive=False)
    repl.dispatch("write Plant.Tank1.Level")
    out = capsys.readouterr().out
    assert out.startswith("Invalid command or arguments\n\nSupported commands:")


def test_unknown_verb_shows_help(ctx, capsys):
    repl = ShellREPL(ctx, build_registry(), interactive=False)
    repl.dispatch("launch rockets")
    assert capsys.readouterr().out.startswith("Supported commands:")


@pytest.mark.parametrize("line", ["read Missing", "cd Missing"])
def test_command_failure_is_reported_and_loop_continues(ctx, capsys, line):
    repl = ShellREPL(ctx, build_registry(), interactive=False)
    repl.dispatch(line)
    out = capsys.readouterr().out
    assert "An error occurred running the last command:\n" in out
    assert "Node not found: Missing" in out
    assert ctx.running is True
    assert ctx.current_node.tag == ""
