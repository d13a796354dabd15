"""Write command."""

from __future__ import annotations

from typing import List

from .base import CommandHandler
from .. import writer
from ..context import ShellContext
from ..parser import Verb


class WriteCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.WRITE, "write [tag[:type]] [value]", "Write value on node")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        raw_tag, raw_value = argv[0], argv[1]
        return 0 if writer.write(ctx, raw_tag, raw_value) is not None else 1
