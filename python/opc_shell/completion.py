"""prompt_toolkit completer for opc-shell."""

from __future__ import annotations

import logging
from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .commands import CommandRegistry
from .context import ShellContext
from .parser import Verb, split_command
from .values import HINTS

LOGGER = logging.getLogger("opc_shell.completion")

TAG_COMMANDS = {Verb.CD.value, Verb.READ.value, Verb.WRITE.value, Verb.MONITOR.value}


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    try:
        tokens = split_command(text)
        trailing = text[-1].isspace()
    except ValueError:
        tokens = text.strip().split()
        trailing = text.endswith((" ", "\t"))
    if trailing:
        tokens.append("")
    return tokens


class ShellCompleter(Completer):
    """Completes verbs, child tag names and write type hints."""

    def __init__(self, ctx: ShellContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        if len(tokens) <= 1:
            prefix = tokens[0] if tokens else ""
            yield from self._yield(self.registry.names(), prefix)
            return
        if len(tokens) != 2 or tokens[0].lower() not in TAG_COMMANDS:
            return
        prefix = tokens[1]
        if tokens[0].lower() == Verb.WRITE.value and ":" in prefix:
            hint_prefix = prefix.rsplit(":", 1)[1]
            yield from self._yield(sorted(HINTS), hint_prefix)
            return
        yield from self._yield(self._child_names(), prefix)

    def _child_names(self) -> List[str]:
        try:
            return [node.name for node in self.ctx.children()]
        except Exception as exc:
            LOGGER.debug("child completion failed: %s", exc)
            return []

    @staticmethod
    def _yield(candidates: Iterable[str], prefix: str) -> Iterable[Completion]:
        needle = prefix.lower()
        for entry in dict.fromkeys(candidates):
            if entry.lower().startswith(needle):
                yield Completion(entry, start_position=-len(prefix))
