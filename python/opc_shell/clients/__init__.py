"""Data-access client adapters for opc-shell."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import (
    BaseTagClient,
    ClientError,
    MonitorCallback,
    Node,
    ReadEvent,
    StopMonitor,
    TagClient,
    join_tag,
    unwrap_value,
)


class ClientType(str, Enum):
    UA = "UA"
    DA = "DA"

    @classmethod
    def parse(cls, text: Optional[str]) -> "ClientType":
        """Case-insensitive lookup; raises ``ValueError`` for unknown names."""
        candidate = (text or "").strip().upper()
        try:
            return cls(candidate)
        except ValueError:
            raise ValueError(f"{text} is not a supported type") from None

    @classmethod
    def names(cls) -> str:
        return ", ".join(member.value for member in cls)


def create_client(client_type: ClientType, url: str, *, period_ms: int = 500) -> TagClient:
    """Build the adapter for *client_type*; the caller connects it."""
    if client_type is ClientType.UA:
        from .ua import UaTagClient

        return UaTagClient(url, period_ms=period_ms)
    if client_type is ClientType.DA:
        from .da import DaTagClient

        return DaTagClient(url, period_ms=period_ms)
    raise ValueError(f"Unsupported client type: {client_type}")


__all__ = [
    "BaseTagClient",
    "ClientError",
    "ClientType",
    "MonitorCallback",
    "Node",
    "ReadEvent",
    "StopMonitor",
    "TagClient",
    "create_client",
    "join_tag",
    "unwrap_value",
]
