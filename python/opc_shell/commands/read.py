"""Read command."""

from __future__ import annotations

from typing import List

from .base import CommandHandler
from ..clients import unwrap_value
from ..context import ShellContext
from ..output import emit_result, format_value, type_name
from ..parser import Verb


class ReadCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.READ, "read [tag]", "Read the node")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        tag = ctx.resolve_tag(argv[0])
        value = unwrap_value(ctx.client.read(tag))
        emit_result(
            ctx,
            message=f"Value: {format_value(value)}",
            data={"tag": tag, "value": value, "type": type_name(value)},
        )
        return 0
