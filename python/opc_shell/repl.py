"""Interactive REPL for opc-shell."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandRegistry
from .completion import ShellCompleter
from .context import ShellContext
from .output import emit_error
from .parser import BadCommand, Command, Verb, parse_command

LOGGER = logging.getLogger("opc_shell.repl")


class ShellREPL:
    """prompt_toolkit REPL on a terminal, plain ``input()`` otherwise."""

    def __init__(
        self,
        ctx: ShellContext,
        registry: CommandRegistry,
        *,
        interactive: Optional[bool] = None,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def run(self) -> int:
        if self.interactive:
            return self._prompt_loop()
        return self._fallback_loop()

    def _prompt_loop(self) -> int:
        session: PromptSession = PromptSession(
            history=InMemoryHistory(),
            completer=ShellCompleter(self.ctx, self.registry),
            complete_while_typing=False,
        )
        while self.ctx.running:
            print()
            try:
                with patch_stdout():
                    line = session.prompt(self.ctx.prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            self.dispatch(line)
        return 0

    def _fallback_loop(self) -> int:
        while self.ctx.running:
            print()
            try:
                line = input(self.ctx.prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            self.dispatch(line)
        return 0

    def dispatch(self, line: str) -> None:
        result = parse_command(line)
        if isinstance(result, BadCommand):
            LOGGER.debug("bad command %r: %s", line, result.reason)
            print("Invalid command or arguments")
            print()
            self.registry.run(Command(Verb.HELP), self.ctx)
            return
        try:
            self.registry.run(result, self.ctx)
        except Exception as exc:
            LOGGER.debug("command %s failed", result.verb.value, exc_info=True)
            emit_error(
                self.ctx,
                message=f"An error occurred running the last command:\n{exc}",
                data={"command": result.verb.value},
            )
