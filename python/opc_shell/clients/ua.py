"""OPC UA adapter built on ``asyncua.sync``."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from asyncua import ua
from asyncua.sync import Client

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

LOGGER = logging.getLogger("opc_shell.clients.ua")

VARIANT_TYPES: Dict[Kind, ua.VariantType] = {
    Kind.BOOLEAN: ua.VariantType.Boolean,
    Kind.SBYTE: ua.VariantType.SByte,
    Kind.BYTE: ua.VariantType.Byte,
    Kind.INT16: ua.VariantType.Int16,
    Kind.UINT16: ua.VariantType.UInt16,
    Kind.INT32: ua.VariantType.Int32,
    Kind.UINT32: ua.VariantType.UInt32,
    Kind.INT64: ua.VariantType.Int64,
    Kind.UINT64: ua.VariantType.UInt64,
    Kind.SINGLE: ua.VariantType.Float,
    Kind.DOUBLE: ua.VariantType.Double,
    # UA has no decimal scalar in asyncua; decimals travel as doubles.
    Kind.DECIMAL: ua.VariantType.Double,
    Kind.STRING: ua.VariantType.String,
}


class _DataChangeHandler:
    """Subscription handler forwarding data changes to a monitor callback."""

    def __init__(self, callback: MonitorCallback, stop: Callable[[], None]) -> None:
        self._callback = callback
        self._stop = stop

    def datachange_notification(self, node: Any, val: Any, data: Any) -> None:
        self._callback(ReadEvent(value=val), self._stop)

    def status_change_notification(self, status: Any) -> None:
        LOGGER.debug("subscription status changed: %s", status)


class UaTagClient(BaseTagClient):
    """Browse-name addressed view of the Objects folder of a UA server.

    Tags are browse names joined with ``.`` below Objects, e.g.
    ``Server.ServerStatus.CurrentTime``.
    """

    root_name = "Objects"

    def __init__(
        self,
        url: str,
        *,
        period_ms: int = 500,
        timeout: float = 4.0,
        client_factory: Callable[..., Any] = Client,
    ) -> None:
        super().__init__(url)
        self.period_ms = period_ms
        self.timeout = timeout
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self._nodes: Dict[str, Any] = {}
        self._subscriptions: List[Any] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def connect(self) -> None:
        client = self._client_factory(self.url, timeout=self.timeout)
        LOGGER.info("connecting to %s", self.url)
        client.connect()
        self._client = client
        self._nodes = {"": client.nodes.objects}
        self._forget()

    def close(self) -> None:
        client = self._client
        if client is None:
            return
        for subscription in self._subscriptions:
            try:
                subscription.delete()
            except Exception as exc:
                LOGGER.debug("subscription delete failed: %s", exc)
        self._subscriptions.clear()
        try:
            client.disconnect()
        finally:
            self._client = None
            self._nodes = {}
            self._forget()

    # ------------------------------------------------------------------
    # Address space
    # ------------------------------------------------------------------
    def explore_folder(self, tag: str) -> List[Node]:
        parent = self.find_node(tag)
        children: List[Node] = []
        for ua_node in self._ua_node(tag).get_children():
            name = ua_node.read_browse_name().Name
            child_tag = join_tag(parent.tag, name)
            self._nodes.setdefault(child_tag, ua_node)
            children.append(Node(tag=child_tag, name=name, parent=parent))
        return self._remember(children)

    def get_data_type(self, tag: str) -> Optional[str]:
        variant_type = self._ua_node(tag).read_data_type_as_variant_type()
        return variant_type.name if variant_type is not None else None

    def read(self, tag: str) -> ReadEvent:
        data_value = self._ua_node(tag).read_data_value()
        status = data_value.StatusCode
        return ReadEvent(
            value=data_value.Value.Value if data_value.Value is not None else None,
            quality=getattr(status, "name", None),
            timestamp=data_value.SourceTimestamp,
        )

    def write(self, tag: str, value: Any, kind: Kind) -> None:
        if kind is Kind.DECIMAL:
            value = float(value)
        self._ua_node(tag).write_value(value, VARIANT_TYPES[kind])

    def monitor(self, tag: str, callback: MonitorCallback) -> StopMonitor:
        ua_node = self._ua_node(tag)
        stopped = threading.Event()
        subscription: Optional[Any] = None

        def stop() -> None:
            # May run on the subscription thread, where deleting would block it.
            if stopped.is_set() or subscription is None:
                return
            stopped.set()
            threading.Thread(target=self._drop_subscription, args=(subscription,), daemon=True).start()

        subscription = self._require_client().create_subscription(
            self.period_ms, _DataChangeHandler(callback, stop)
        )
        self._subscriptions.append(subscription)
        subscription.subscribe_data_change(ua_node)
        return stop

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_client(self) -> Any:
        if self._client is None:
            raise ClientError("Not connected")
        return self._client

    def _ua_node(self, tag: str) -> Any:
        self._require_client()
        tag = tag.strip()
        cached = self._nodes.get(tag)
        if cached is not None:
            return cached
        current = self._nodes[""]
        walked = ""
        for part in tag.split(TAG_SEPARATOR):
            walked = join_tag(walked, part)
            cached = self._nodes.get(walked)
            if cached is None:
                cached = next(
                    (child for child in current.get_children() if child.read_browse_name().Name == part),
                    None,
                )
                if cached is None:
                    raise LookupError(f"Node not found: {tag}")
                self._nodes[walked] = cached
            current = cached
        return current

    def _drop_subscription(self, subscription: Any) -> None:
        try:
            subscription.delete()
        except Exception as exc:
            LOGGER.debug("subscription delete failed: %s", exc)
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
