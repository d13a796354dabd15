"""Guided interactive setup used when opc-shell starts without arguments."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .clients import ClientType
from .discovery import SelectionError, ServerEnumerator, discover, parse_selection, print_servers

LOGGER = logging.getLogger("opc_shell.startup")

MANUAL_URL_EXAMPLES = {
    ClientType.DA: "opcda://localhost/Matrikon.OPC.Simulation.1",
    ClientType.UA: "opc.tcp://host:port/endpoint",
}


def read_non_empty(prompt: str = "") -> str:
    """Prompt until the user types something other than whitespace."""
    line = input(prompt)
    while not line.strip():
        line = input("Please enter a value: ")
    return line.strip()


def ask_client_type() -> ClientType:
    while True:
        try:
            return ClientType.parse(input("Type (UA/DA): "))
        except ValueError:
            print("Invalid type.")


def ask_manual_url(client_type: ClientType) -> str:
    label = client_type.value
    print(f"Enter {label} URL. Example:")
    print(f"  {MANUAL_URL_EXAMPLES[client_type]}")
    return read_non_empty(f"{label} URL: ")


def ask_da_url(enumerate_servers: Optional[ServerEnumerator] = None) -> Optional[str]:
    """Discover local DA servers and let the user pick one.

    Returns ``None`` when the selection is invalid.
    """
    host = input("Host for DA discovery (blank = localhost): ").strip() or "localhost"
    servers = discover(host, enumerate_servers)
    if not servers:
        print(f"No OPC DA servers found on host '{host}'.")
        return ask_manual_url(ClientType.DA)
    print_servers(host, servers)
    pick = input("Select: ")
    try:
        url = parse_selection(pick, host, servers)
    except SelectionError as exc:
        LOGGER.debug("%s", exc)
        print("Invalid selection.")
        return None
    if url is None:
        return ask_manual_url(ClientType.DA)
    print(f"Chosen: {url}")
    return url


def interactive_setup(enumerate_servers: Optional[ServerEnumerator] = None) -> Optional[Tuple[ClientType, str]]:
    """Ask for the server type and URL; ``None`` aborts startup."""
    client_type = ask_client_type()
    if client_type is ClientType.DA:
        url = ask_da_url(enumerate_servers)
        if url is None:
            return None
    else:
        url = read_non_empty("UA URL (ex: opc.tcp://host:port/endpoint): ")
    return client_type, url


__all__ = ["ask_client_type", "ask_da_url", "ask_manual_url", "interactive_setup", "read_non_empty"]
