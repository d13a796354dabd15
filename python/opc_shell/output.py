"""Output helpers for opc-shell."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from .context import ShellContext


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True, default=str)


def emit_result(ctx: ShellContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: ShellContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(message)


def type_name(value: Any) -> str:
    return type(value).__name__ if value is not None else ""


def format_value(value: Any) -> str:
    """Render a tag value the way read and monitor print it."""
    shown = "" if value is None else value
    return f"{shown} | Type: {type_name(value)}"


__all__ = ["emit_result", "emit_error", "type_name", "format_value"]
