"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import CommandHandler
from ..context import ShellContext
from ..parser import Verb

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry

FOOTER = "subnodes are separated by '.' The tag is relative to the current folder"


class HelpCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.HELP, "help", "Show this help")
        self._registry: CommandRegistry | None = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        registry = self._registry
        if not registry:
            return 1
        print("Supported commands:")
        for command in registry.list_commands():
            print(command.format_help())
        print(FOOTER)
        return 0
