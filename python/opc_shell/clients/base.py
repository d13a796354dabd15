"""Client interface consumed by the shell, plus shared adapter helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from ..values import Kind

LOGGER = logging.getLogger("opc_shell.clients")

TAG_SEPARATOR = "."

StopMonitor = Callable[[], None]
MonitorCallback = Callable[[Any, StopMonitor], None]


class ClientError(RuntimeError):
    """Raised when an adapter cannot complete a server operation."""


@dataclass(frozen=True)
class Node:
    """A position in the server address space.

    ``tag`` is the absolute path (empty for the root), ``name`` the display
    name.  ``parent`` is ``None`` only for the root.
    """

    tag: str
    name: str
    parent: Optional["Node"] = field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        return self.tag or self.name


@dataclass(frozen=True)
class ReadEvent:
    value: Any
    quality: Optional[str] = None
    timestamp: Any = None


def unwrap_value(result: Any) -> Any:
    """Return the bare value of a read result or monitor notification."""
    if isinstance(result, ReadEvent):
        return result.value
    return result


def join_tag(parent_tag: str, name: str) -> str:
    return f"{parent_tag}{TAG_SEPARATOR}{name}" if parent_tag else name


class TagClient(Protocol):
    """Operations the shell needs from a data-access client."""

    @property
    def root_node(self) -> Node: ...

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def find_node(self, tag: str) -> Node: ...

    def explore_folder(self, tag: str) -> List[Node]: ...

    def get_data_type(self, tag: str) -> Optional[str]: ...

    def read(self, tag: str) -> Any: ...

    def write(self, tag: str, value: Any, kind: Kind) -> None: ...

    def monitor(self, tag: str, callback: MonitorCallback) -> StopMonitor: ...


class BaseTagClient:
    """Shared behaviour for adapters: tag tree walking and context management.

    Nodes handed out by ``explore_folder`` are remembered by tag, so a walk
    only browses folders that have not been seen yet.
    """

    root_name = "Root"

    def __init__(self, url: str) -> None:
        self.url = url
        self._root = Node(tag="", name=self.root_name)
        self._known: Dict[str, Node] = {"": self._root}

    @property
    def root_node(self) -> Node:
        return self._root

    def connect(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def explore_folder(self, tag: str) -> List[Node]:
        raise NotImplementedError

    def find_node(self, tag: str) -> Node:
        """Walk the tree from the root, one ``.``-separated name at a time."""
        tag = tag.strip()
        known = self._known.get(tag)
        if known is not None:
            return known
        node = self._root
        walked = ""
        for part in tag.split(TAG_SEPARATOR):
            walked = join_tag(walked, part)
            match = self._known.get(walked)
            if match is None:
                match = next((child for child in self.explore_folder(node.tag) if child.name == part), None)
                if match is None:
                    raise LookupError(f"Node not found: {tag}")
            node = match
        return node

    def _remember(self, nodes: List[Node]) -> List[Node]:
        # First node per tag wins, like name matching in find_node.
        for node in nodes:
            self._known.setdefault(node.tag, node)
        return nodes

    def _forget(self) -> None:
        self._known = {"": self._root}

    def __enter__(self) -> "BaseTagClient":
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
