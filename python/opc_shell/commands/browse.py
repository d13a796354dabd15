"""Folder listing command."""

from __future__ import annotations

from typing import List

from .base import CommandHandler
from ..context import ShellContext
from ..output import emit_result
from ..parser import Verb


class LsCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.LS, "ls", "Display the subnodes")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        nodes = ctx.children()
        data = {"tag": ctx.current_node.tag, "children": [{"name": n.name, "tag": n.tag} for n in nodes]}
        if not nodes:
            emit_result(ctx, message="no subnodes", data=data)
            return 0
        emit_result(ctx, message="\n".join(node.name for node in nodes), data=data)
        return 0
