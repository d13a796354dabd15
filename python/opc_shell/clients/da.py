"""OPC DA adapter built on OpenOPC (Windows only).

Connection URLs have the form ``opcda://host/ProgId``.  OpenOPC talks to the
server through the OPC Automation COM wrapper, so it is imported lazily and
only ever works on Windows hosts with the wrapper registered.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple
from urllib.parse import unquote, urlsplit

from ..values import Kind
from .base import (
    BaseTagClient,
    ClientError,
    MonitorCallback,
    Node,
    ReadEvent,
    StopMonitor,
    TAG_SEPARATOR,
    join_tag,
)

LOGGER = logging.getLogger("opc_shell.clients.da")

DA_SCHEME = "opcda"
CANONICAL_DATATYPE_PROPERTY = 1


def open_opc_client() -> Any:
    """Create an OpenOPC client object (requires OpenOPC and pywin32)."""
    import OpenOPC

    return OpenOPC.client()


def parse_da_url(url: str) -> Tuple[str, str]:
    """Split ``opcda://host/ProgId`` into ``(host, prog_id)``."""
    parts = urlsplit(url)
    if parts.scheme.lower() != DA_SCHEME:
        raise ValueError(f"Not an {DA_SCHEME}:// URL: {url}")
    host = parts.netloc or "localhost"
    prog_id = unquote(parts.path.lstrip("/"))
    if not prog_id:
        raise ValueError(f"Missing server ProgId in URL: {url}")
    return host, prog_id


def enumerate_local_servers(host: str, *, opc_factory: Callable[[], Any] = open_opc_client) -> List[str]:
    """Ask the OPC Automation wrapper for the DA servers registered on *host*."""
    return list(opc_factory().servers(host) or [])


class DaTagClient(BaseTagClient):
    """Dot-separated item tree of a DA server."""

    def __init__(
        self,
        url: str,
        *,
        period_ms: int = 500,
        opc_factory: Callable[[], Any] = open_opc_client,
    ) -> None:
        super().__init__(url)
        self.host, self.prog_id = parse_da_url(url)
        self.period_ms = period_ms
        self._opc_factory = opc_factory
        self._opc: Optional[Any] = None
        self._monitors: List[threading.Event] = []

    def connect(self) -> None:
        opc = self._opc_factory()
        LOGGER.info("connecting to %s on %s", self.prog_id, self.host)
        opc.connect(self.prog_id, self.host)
        self._opc = opc
        self._forget()

    def close(self) -> None:
        for stop_event in self._monitors:
            stop_event.set()
        self._monitors.clear()
        opc = self._opc
        if opc is None:
            return
        try:
            opc.close()
        finally:
            self._opc = None
            self._forget()

    def explore_folder(self, tag: str) -> List[Node]:
        parent = self.find_node(tag)
        names = self._require_opc().list(tag or "*")
        children: List[Node] = []
        for entry in names or []:
            # Leaves may come back as fully qualified item ids.
            name = str(entry).rsplit(TAG_SEPARATOR, 1)[-1]
            children.append(Node(tag=join_tag(parent.tag, name), name=name, parent=parent))
        return self._remember(children)

    def get_data_type(self, tag: str) -> Optional[str]:
        data_type = self._require_opc().properties(tag, id=CANONICAL_DATATYPE_PROPERTY)
        return str(data_type) if data_type else None

    def read(self, tag: str) -> ReadEvent:
        value, quality, timestamp = self._require_opc().read(tag)
        return ReadEvent(value=value, quality=quality, timestamp=timestamp)

    def write(self, tag: str, value: Any, kind: Kind) -> None:
        if isinstance(value, Decimal):
            value = float(value)
        status = self._require_opc().write((tag, value))
        if status != "Success":
            raise ClientError(f"Write to {tag} failed: {status}")

    def monitor(self, tag: str, callback: MonitorCallback) -> StopMonitor:
        self._require_opc()
        stop_event = threading.Event()
        self._monitors.append(stop_event)
        worker = threading.Thread(target=self._poll, args=(tag, callback, stop_event), daemon=True)
        worker.start()
        return stop_event.set

    def _poll(self, tag: str, callback: MonitorCallback, stop_event: threading.Event) -> None:
        # COM objects cannot cross threads; the poller owns its own connection.
        opc = self._opc_factory()
        interval = max(self.period_ms, 50) / 1000.0
        missing = object()
        last: Any = missing
        try:
            opc.connect(self.prog_id, self.host)
            while not stop_event.is_set():
                value, quality, timestamp = opc.read(tag)
                if last is missing or value != last:
                    last = value
                    callback(ReadEvent(value=value, quality=quality, timestamp=timestamp), stop_event.set)
                stop_event.wait(interval)
        except Exception as exc:
            LOGGER.warning("monitor of %s stopped: %s", tag, exc)
        finally:
            try:
                opc.close()
            except Exception as exc:
                LOGGER.debug("monitor connection close failed: %s", exc)

    def _require_opc(self) -> Any:
        if self._opc is None:
            raise ClientError("Not connected")
        return self._opc
