"""Command line tokenizing and verb selection for opc-shell."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Union


class Verb(str, Enum):
    HELP = "help"
    READ = "read"
    WRITE = "write"
    LS = "ls"
    ROOT = "root"
    UP = "up"
    MONITOR = "monitor"
    CD = "cd"
    EXIT = "exit"


REQUIRED_ARGS: Dict[Verb, int] = {
    Verb.READ: 1,
    Verb.WRITE: 2,
    Verb.CD: 1,
    Verb.MONITOR: 1,
}


@dataclass(frozen=True)
class Command:
    verb: Verb
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BadCommand:
    reason: str


ParseResult = Union[Command, BadCommand]


def split_command(line: str) -> List[str]:
    """Split a command line into tokens, honouring single and double quotes.

    Backslashes are ordinary characters so Windows paths survive intact.
    Raises ``ValueError`` on unbalanced quotes.
    """
    if not line:
        return []
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.escape = ""
    lexer.commenters = ""
    return list(lexer)


def parse_command(line: str) -> ParseResult:
    """Turn a raw input line into a :class:`Command` or a :class:`BadCommand`.

    Unknown or missing verbs select ``help``.
    """
    try:
        tokens = split_command(line)
    except ValueError as exc:
        return BadCommand(f"parse error: {exc}")
    if not tokens:
        return Command(Verb.HELP)
    name, *args = tokens
    try:
        verb = Verb(name.lower())
    except ValueError:
        verb = Verb.HELP
    required = REQUIRED_ARGS.get(verb, 0)
    if len(args) < required:
        return BadCommand(f"'{verb.value}' expects {required} argument(s), got {len(args)}")
    return Command(verb, tuple(args))


__all__ = ["Verb", "Command", "BadCommand", "ParseResult", "REQUIRED_ARGS", "split_command", "parse_command"]
