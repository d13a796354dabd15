"""Monitor command."""

from __future__ import annotations

import threading
from typing import Any, List

from .base import CommandHandler
from ..clients import StopMonitor, unwrap_value
from ..context import ShellContext
from ..output import emit_result, format_value, type_name
from ..parser import Verb


class MonitorCommand(CommandHandler):
    def __init__(self) -> None:
        super().__init__(Verb.MONITOR, "monitor [node]", "monitor the node")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        tag = ctx.resolve_tag(argv[0])
        cancelled = threading.Event()

        def on_change(event: Any, stop: StopMonitor) -> None:
            # Runs on the client's notification thread.
            if cancelled.is_set():
                stop()
                return
            value = unwrap_value(event)
            emit_result(
                ctx,
                message=f"Value changed: {format_value(value)}",
                data={"tag": tag, "value": value, "type": type_name(value)},
            )

        stop_monitor = ctx.client.monitor(tag, on_change)
        print("Started monitoring. Press Enter to interrupt.")
        try:
            ctx.wait_for_interrupt()
        finally:
            cancelled.set()
            if stop_monitor is not None:
                stop_monitor()
        return 0
