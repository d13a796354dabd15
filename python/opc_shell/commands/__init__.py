"""Command registry for opc-shell."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .base import CommandHandler
from .browse import LsCommand
from .exit import ExitCommand
from .help import HelpCommand
from .monitor import MonitorCommand
from .navigation import CdCommand, RootCommand, UpCommand
from .read import ReadCommand
from .write import WriteCommand
from ..context import ShellContext
from ..parser import Command, Verb


class CommandRegistry:
    """Maps each verb to its handler."""

    def __init__(self) -> None:
        self._commands: Dict[Verb, CommandHandler] = {}
        self._ordered: List[CommandHandler] = []

    def register(self, command: CommandHandler) -> None:
        self._ordered.append(command)
        self._commands[command.verb] = command

    def get(self, verb: Verb) -> Optional[CommandHandler]:
        return self._commands.get(verb)

    def list_commands(self) -> Iterable[CommandHandler]:
        return self._ordered

    def names(self) -> List[str]:
        return [command.verb.value for command in self._ordered]

    def run(self, command: Command, ctx: ShellContext) -> int:
        handler = self._commands.get(command.verb) or self._commands[Verb.HELP]
        return handler.run(ctx, list(command.args))


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    commands = [
        LsCommand(),
        CdCommand(),
        ReadCommand(),
        WriteCommand(),
        RootCommand(),
        UpCommand(),
        MonitorCommand(),
        HelpCommand(),
        ExitCommand(),
    ]
    for command in commands:
        registry.register(command)
        bind = getattr(command, "bind", None)
        if callable(bind):
            bind(registry)
    return registry


__all__ = ["CommandHandler", "CommandRegistry", "build_registry"]
