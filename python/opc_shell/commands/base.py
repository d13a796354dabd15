"""Command base classes for opc-shell."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..context import ShellContext
from ..parser import Verb


@dataclass
class CommandHandler:
    """Abstract command description."""

    verb: Verb
    usage: str
    description: str

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        return f"  {self.usage}: {self.description}"
