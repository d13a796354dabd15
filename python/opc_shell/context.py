"""Shell context: client handle, navigation cursor and tag resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from .clients import Node, TagClient

LOGGER = logging.getLogger("opc_shell.context")


def wait_for_enter() -> None:
    """Block until the user presses Enter (or Ctrl-C / EOF)."""
    try:
        input()
    except (EOFError, KeyboardInterrupt):
        pass


@dataclass
class ShellContext:
    """Holds shared REPL state for one connected client."""

    client: TagClient
    json_output: bool = False
    wait_for_interrupt: Callable[[], None] = wait_for_enter
    running: bool = True
    _current: Node = field(init=False, repr=False)
    _closed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        self._current = self.client.root_node

    @property
    def current_node(self) -> Node:
        return self._current

    @property
    def prompt(self) -> str:
        return f"{self.current_node.label}: "

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def go_root(self) -> Node:
        self._current = self.client.root_node
        return self._current

    def go_up(self) -> Node:
        parent = self.current_node.parent
        self._current = parent if parent is not None else self.client.root_node
        return self._current

    def change_node(self, relative_tag: str) -> Node:
        """Move the cursor to *relative_tag*; the cursor is unchanged on failure."""
        tag = self.resolve_tag(relative_tag)
        node = self.client.find_node(tag)
        if node is None:
            raise LookupError(f"Node not found: {tag}")
        self._current = node
        return node

    def children(self) -> List[Node]:
        return list(self.client.explore_folder(self.current_node.tag) or [])

    def resolve_tag(self, relative_tag: str) -> str:
        """Map a child name of the current node to its absolute tag.

        The first child (in enumeration order) whose name matches wins;
        anything else is passed through unchanged.
        """
        for child in self.children():
            if child.name == relative_tag:
                return child.tag
        return relative_tag

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Release the client connection once."""
        if self._closed:
            return
        self._closed = True
        try:
            self.client.close()
        except Exception as exc:
            LOGGER.warning("client close failed: %s", exc)
