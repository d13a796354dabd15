"""Type resolution and write coercion for the ``write`` command.

The kind used for a write is chosen, in priority order, from:

1. an explicit ``TAG:hint`` suffix on the tag token;
2. the data type the server reports for the tag;
3. the runtime type of the tag's current value;
4. single precision float as a last resort.

Integer tags receiving decimal-looking text (``3.5`` or ``3,5``) are written
as Single (or Double when Single cannot hold the value) instead of being
rejected or truncated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .clients import unwrap_value
from .context import ShellContext
from .output import emit_error, emit_result
from .values import (
    Kind,
    SOFT_INTEGER_KINDS,
    TagFormatError,
    classify,
    classify_value,
    hint_kind,
    looks_decimal,
    parse_double,
    parse_single,
    parse_value,
)

LOGGER = logging.getLogger("opc_shell.writer")


@dataclass(frozen=True)
class TypedWrite:
    tag: str
    kind: Kind
    value: Any


def split_type_hint(raw_tag: str) -> Tuple[str, Optional[str]]:
    """Split ``TAG:hint`` on the last colon, unless it is first or last."""
    idx = raw_tag.rfind(":")
    if 0 < idx < len(raw_tag) - 1:
        return raw_tag[:idx], raw_tag[idx + 1 :]
    return raw_tag, None


def coerce(raw_value: str, kind: Kind) -> Tuple[Kind, Any]:
    """Parse *raw_value* for a tag of *kind*, returning the kind actually written."""
    if kind in SOFT_INTEGER_KINDS and looks_decimal(raw_value):
        try:
            return Kind.SINGLE, parse_single(raw_value)
        except TagFormatError:
            return Kind.DOUBLE, parse_double(raw_value)
    return kind, parse_value(raw_value, kind)


def infer_kind(ctx: ShellContext, tag: str) -> Kind:
    reported = ctx.client.get_data_type(tag)
    kind = classify(reported)
    if kind is not None:
        return kind
    current = unwrap_value(ctx.client.read(tag))
    kind = classify_value(current)
    LOGGER.debug("tag %s reported type %r, current value %r -> %s", tag, reported, current, kind)
    return kind if kind is not None else Kind.SINGLE


def write(ctx: ShellContext, raw_tag: str, raw_value: str) -> Optional[TypedWrite]:
    """Coerce *raw_value* and write it to the tag named by *raw_tag*.

    Coercion and write failures are reported and ``None`` is returned; tag
    resolution failures propagate to the REPL.
    """
    base_tag, hint = split_type_hint(raw_tag)
    if hint and hint.strip():
        tag = ctx.resolve_tag(base_tag)
        try:
            kind = hint_kind(hint)
            if kind is None:
                raise TagFormatError(f"Unknown type hint: {hint}")
            typed = TypedWrite(tag, kind, parse_value(raw_value, kind))
            ctx.client.write(typed.tag, typed.value, typed.kind)
        except Exception as exc:
            LOGGER.debug("hinted write to %s failed", tag, exc_info=True)
            emit_error(ctx, message=f"Write error (hint): {exc}", data={"tag": tag, "hint": hint})
            return None
        _report(ctx, typed)
        return typed

    tag = ctx.resolve_tag(raw_tag)
    try:
        kind, value = coerce(raw_value, infer_kind(ctx, tag))
        typed = TypedWrite(tag, kind, value)
        ctx.client.write(typed.tag, typed.value, typed.kind)
    except Exception as exc:
        LOGGER.debug("write to %s failed", tag, exc_info=True)
        emit_error(ctx, message=f"Write error: {exc}", data={"tag": tag})
        return None
    _report(ctx, typed)
    return typed


def _report(ctx: ShellContext, typed: TypedWrite) -> None:
    emit_result(
        ctx,
        message=f"Written: {typed.tag} = {typed.value} ({typed.kind})",
        data={"tag": typed.tag, "kind": typed.kind.value, "value": typed.value},
    )


__all__ = ["TypedWrite", "split_type_hint", "coerce", "infer_kind", "write"]
