"""
opc-shell package.

Interactive shell for browsing, reading, writing and monitoring tags on
OPC UA and OPC DA servers.  Use ``opc-shell`` or ``python -m opc_shell`` to
launch it.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
