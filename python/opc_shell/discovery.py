"""Host-local discovery of OPC DA servers and server selection."""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

LOGGER = logging.getLogger("opc_shell.discovery")

DA_URL_SCHEME = "opcda"
MANUAL_ENTRY = "m"

ServerEnumerator = Callable[[str], Iterable[str]]


class SelectionError(ValueError):
    """Raised when a server selection is neither an index nor the manual escape."""


@dataclass(frozen=True)
class ServerDescriptor:
    prog_id: str


def _default_enumerator(host: str) -> Iterable[str]:
    from .clients.da import enumerate_local_servers

    return enumerate_local_servers(host)


def local_names() -> List[str]:
    """Names that refer to this machine: localhost plus full and short host name."""
    hostname = socket.gethostname()
    names = ["localhost", hostname, hostname.split(".", 1)[0]]
    return [name.lower() for name in names if name]


def is_local_host(host: str) -> bool:
    return (host or "").strip().lower() in local_names()


def root_cause(exc: BaseException) -> BaseException:
    """Follow ``__cause__``/``__context__`` down to the innermost exception."""
    seen = {id(exc)}
    while True:
        inner = exc.__cause__ or exc.__context__
        if inner is None or id(inner) in seen:
            return exc
        seen.add(id(inner))
        exc = inner


def discover(host: str, enumerate_servers: Optional[ServerEnumerator] = None) -> List[ServerDescriptor]:
    """List DA servers on *host*, sorted case-insensitively.

    Only the local machine can be queried; any failure is reported and an
    empty list returned.
    """
    if not is_local_host(host):
        print("DA discovery via OPC Automation only supports localhost.")
        return []
    enumerate_servers = enumerate_servers or _default_enumerator
    try:
        names = list(enumerate_servers(host) or [])
    except Exception as exc:
        cause = root_cause(exc)
        LOGGER.debug("discovery on %s failed", host, exc_info=True)
        print(f"DA discovery error: {cause}")
        return []
    servers = [ServerDescriptor(str(name).strip()) for name in names if name and str(name).strip()]
    return sorted(servers, key=lambda server: server.prog_id.lower())


def server_url(host: str, server: ServerDescriptor) -> str:
    return f"{DA_URL_SCHEME}://{host}/{server.prog_id}"


def print_servers(host: str, servers: List[ServerDescriptor]) -> None:
    print()
    print(f"OPC DA servers on {host}:")
    for index, server in enumerate(servers, 1):
        print(f"  [{index}] {server.prog_id}")
    print("  [M] Manual URL")


def parse_selection(pick: str, host: str, servers: List[ServerDescriptor]) -> Optional[str]:
    """Return the URL for a 1-based index, ``None`` for the manual escape.

    Raises :class:`SelectionError` for anything else.
    """
    choice = (pick or "").strip()
    if choice.lower() == MANUAL_ENTRY:
        return None
    try:
        index = int(choice)
    except ValueError:
        raise SelectionError(f"Invalid selection: {pick!r}") from None
    if not 1 <= index <= len(servers):
        raise SelectionError(f"Selection out of range: {index}")
    return server_url(host, servers[index - 1])


__all__ = [
    "ServerDescriptor",
    "SelectionError",
    "discover",
    "is_local_host",
    "local_names",
    "parse_selection",
    "print_servers",
    "root_cause",
    "server_url",
]
