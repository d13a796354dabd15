"""Navigation commands (cd/root/up)."""

from __future__ import annotations

from typing import List

from .base import CommandHandler
from ..context import ShellContext
from ..parser import Verb


class CdCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.CD, "cd [tag]", "Visit a children node")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        ctx.change_node(argv[0])
        return 0


class RootCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.ROOT, "root", "Go to root node")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        ctx.go_root()
        return 0


class UpCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.UP, "up", "Go up one folder")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        ctx.go_up()
        return 0
