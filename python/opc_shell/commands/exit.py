"""Exit command."""

from __future__ import annotations

from typing import List

from .base import CommandHandler
from ..context import ShellContext
from ..parser import Verb


class ExitCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.EXIT, "exit", "Disconnect and leave the shell")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        ctx.close()
        ctx.running = False
        return 0
