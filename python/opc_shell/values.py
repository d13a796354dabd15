"""Value kinds and the flexible text parsers used by the write command.

Server-side type metadata is often stale or coarse, and the server host and
the shell host rarely agree on locale.  The parsers here therefore try several
interpretations of the user's text before giving up:

* numbers accept either ``.`` or ``,`` as decimal separator and fall back to
  the current locale and to a separator-swapped variant;
* booleans accept ``true``/``false``, ``1``/``0`` and ``on``/``off``;
* integers are range checked against the width of their kind.

``classify`` maps any type descriptor reported by a client (``"Int32"``,
``"Float"``, ``"VT_R4"`` ...) to a :class:`Kind`, and ``classify_value`` does
the same for a Python value read back from the server.
"""

from __future__ import annotations

import locale
import math
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Optional


class TagFormatError(ValueError):
    """Raised when text cannot be coerced to the requested kind."""


class Kind(str, Enum):
    BOOLEAN = "Boolean"
    SBYTE = "SByte"
    BYTE = "Byte"
    INT16 = "Int16"
    UINT16 = "UInt16"
    INT32 = "Int32"
    UINT32 = "UInt32"
    INT64 = "Int64"
    UINT64 = "UInt64"
    SINGLE = "Single"
    DOUBLE = "Double"
    DECIMAL = "Decimal"
    STRING = "String"

    def __str__(self) -> str:
        return self.value


INTEGER_RANGES: Dict[Kind, tuple[int, int]] = {
    Kind.SBYTE: (-(2**7), 2**7 - 1),
    Kind.BYTE: (0, 2**8 - 1),
    Kind.INT16: (-(2**15), 2**15 - 1),
    Kind.UINT16: (0, 2**16 - 1),
    Kind.INT32: (-(2**31), 2**31 - 1),
    Kind.UINT32: (0, 2**32 - 1),
    Kind.INT64: (-(2**63), 2**63 - 1),
    Kind.UINT64: (0, 2**64 - 1),
}

# Integer kinds that switch to a floating write when the text looks decimal.
SOFT_INTEGER_KINDS = frozenset(
    {Kind.INT16, Kind.UINT16, Kind.INT32, Kind.UINT32, Kind.INT64, Kind.UINT64}
)

FLOAT_KINDS = frozenset({Kind.SINGLE, Kind.DOUBLE, Kind.DECIMAL})

SINGLE_MAX = 3.4028234663852886e38

HINTS: Dict[str, Kind] = {
    "single": Kind.SINGLE,
    "float": Kind.SINGLE,
    "f": Kind.SINGLE,
    "double": Kind.DOUBLE,
    "d": Kind.DOUBLE,
    "decimal": Kind.DECIMAL,
    "dec": Kind.DECIMAL,
    "int": Kind.INT32,
    "i32": Kind.INT32,
    "int32": Kind.INT32,
    "i16": Kind.INT16,
    "int16": Kind.INT16,
    "i64": Kind.INT64,
    "int64": Kind.INT64,
    "u16": Kind.UINT16,
    "uint16": Kind.UINT16,
    "u32": Kind.UINT32,
    "uint32": Kind.UINT32,
    "u64": Kind.UINT64,
    "uint64": Kind.UINT64,
    "bool": Kind.BOOLEAN,
    "boolean": Kind.BOOLEAN,
    "string": Kind.STRING,
    "str": Kind.STRING,
    "s": Kind.STRING,
    "byte": Kind.BYTE,
    "u8": Kind.BYTE,
    "uint8": Kind.BYTE,
    "sbyte": Kind.SBYTE,
    "i8": Kind.SBYTE,
    "int8": Kind.SBYTE,
}

# Reported data type names: plain names (Int32, Single), OPC UA variant names and OPC DA VT_* names.
TYPE_NAMES: Dict[str, Kind] = {
    "boolean": Kind.BOOLEAN,
    "bool": Kind.BOOLEAN,
    "vt_bool": Kind.BOOLEAN,
    "sbyte": Kind.SBYTE,
    "vt_i1": Kind.SBYTE,
    "byte": Kind.BYTE,
    "vt_ui1": Kind.BYTE,
    "int16": Kind.INT16,
    "vt_i2": Kind.INT16,
    "uint16": Kind.UINT16,
    "vt_ui2": Kind.UINT16,
    "int32": Kind.INT32,
    "vt_i4": Kind.INT32,
    "vt_int": Kind.INT32,
    "uint32": Kind.UINT32,
    "vt_ui4": Kind.UINT32,
    "vt_uint": Kind.UINT32,
    "int64": Kind.INT64,
    "vt_i8": Kind.INT64,
    "uint64": Kind.UINT64,
    "vt_ui8": Kind.UINT64,
    "single": Kind.SINGLE,
    "float": Kind.SINGLE,
    "vt_r4": Kind.SINGLE,
    "double": Kind.DOUBLE,
    "vt_r8": Kind.DOUBLE,
    "decimal": Kind.DECIMAL,
    "vt_decimal": Kind.DECIMAL,
    "string": Kind.STRING,
    "vt_bstr": Kind.STRING,
}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def hint_kind(hint: str) -> Optional[Kind]:
    """Return the kind named by a ``TAG:hint`` suffix, or ``None``."""
    return HINTS.get(hint.strip().lower())


def classify(descriptor: Any) -> Optional[Kind]:
    """Map a client-reported data type descriptor to a :class:`Kind`.

    *descriptor* may be a plain name, an enum member (its ``name`` is used)
    or a Kind.  Unknown or missing descriptors return ``None``.
    """
    if descriptor is None:
        return None
    if isinstance(descriptor, Kind):
        return descriptor
    if isinstance(descriptor, str):
        name = descriptor
    else:
        name = getattr(descriptor, "name", None) or getattr(descriptor, "__name__", None)
    if not name:
        return None
    return TYPE_NAMES.get(str(name).strip().lower())


def classify_value(value: Any) -> Optional[Kind]:
    """Infer a kind from the runtime type of a value read from the server."""
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        for kind in (Kind.INT32, Kind.INT64, Kind.UINT64):
            low, high = INTEGER_RANGES[kind]
            if low <= value <= high:
                return kind
        return None
    if isinstance(value, float):
        return Kind.DOUBLE
    if isinstance(value, Decimal):
        return Kind.DECIMAL
    if isinstance(value, str):
        return Kind.STRING
    return None


def looks_decimal(text: str) -> bool:
    return "." in text or "," in text


# ---------------------------------------------------------------------------
# Flexible parsers
# ---------------------------------------------------------------------------

def normalize_decimal(text: str) -> str:
    """Trim, and treat a comma as the decimal separator when no dot is present."""
    text = (text or "").strip()
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    return text


def swap_separators(text: str) -> str:
    return text.translate(str.maketrans(",.", ".,"))


def _parse_invariant(text: str, convert: Callable[[str], Any]) -> Any:
    # "." is the decimal point; "," is only accepted as a group separator
    # in the integer part.
    whole, dot, fraction = text.partition(".")
    if "," in fraction:
        raise ValueError(text)
    return convert(whole.replace(",", "") + dot + fraction)


def _parse_current(text: str, convert: Callable[[str], Any]) -> Any:
    return locale.atof(text, convert)


def _to_decimal(text: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(text) from exc
    if not value.is_finite():
        raise ValueError(text)
    return value


def _parse_flexible(text: str, kind: Kind, convert: Callable[[str], Any]) -> Any:
    normalized = normalize_decimal(text)
    if "_" in normalized:
        raise TagFormatError(f"Invalid numeric value for {kind}: {normalized}")
    swapped = swap_separators(normalized)
    attempts = (
        (_parse_invariant, normalized),
        (_parse_current, normalized),
        (_parse_invariant, swapped),
        (_parse_current, swapped),
    )
    for parse, candidate in attempts:
        if not candidate:
            continue
        try:
            return parse(candidate, convert)
        except (ValueError, ArithmeticError):
            continue
    raise TagFormatError(f"Invalid numeric value for {kind}: {normalized}")


def parse_single(text: str) -> float:
    value = _parse_flexible(text, Kind.SINGLE, float)
    if not math.isfinite(value) or abs(value) > SINGLE_MAX:
        raise TagFormatError(f"Invalid numeric value for {Kind.SINGLE}: {normalize_decimal(text)}")
    return value


def parse_double(text: str) -> float:
    value = _parse_flexible(text, Kind.DOUBLE, float)
    if not math.isfinite(value):
        raise TagFormatError(f"Invalid numeric value for {Kind.DOUBLE}: {normalize_decimal(text)}")
    return value


def parse_decimal(text: str) -> Decimal:
    return _parse_flexible(text, Kind.DECIMAL, _to_decimal)


def parse_bool(text: str) -> bool:
    token = (text or "").strip().lower()
    if token in ("true", "1", "on"):
        return True
    if token in ("false", "0", "off"):
        return False
    raise TagFormatError(f"Invalid boolean value: {text}")


def parse_int(text: str, kind: Kind) -> int:
    """Convert *text* to an integer that fits *kind*."""
    token = (text or "").strip()
    try:
        if "_" in token:
            raise ValueError(token)
        value = int(token, 10)
    except ValueError as exc:
        raise TagFormatError(f"Input string was not in a correct format for {kind}: {text}") from exc
    low, high = INTEGER_RANGES[kind]
    if not low <= value <= high:
        raise TagFormatError(f"Value was either too large or too small for {kind}: {text}")
    return value


def parse_value(text: str, kind: Kind) -> Any:
    """Parse *text* strictly as *kind* (no integer-to-float soft override)."""
    if kind is Kind.STRING:
        return text
    if kind is Kind.BOOLEAN:
        return parse_bool(text)
    if kind is Kind.SINGLE:
        return parse_single(text)
    if kind is Kind.DOUBLE:
        return parse_double(text)
    if kind is Kind.DECIMAL:
        return parse_decimal(text)
    return parse_int(text, kind)


__all__ = [
    "Kind",
    "TagFormatError",
    "HINTS",
    "TYPE_NAMES",
    "hint_kind",
    "classify",
    "classify_value",
    "looks_decimal",
    "normalize_decimal",
    "swap_separators",
    "parse_single",
    "parse_double",
    "parse_decimal",
    "parse_bool",
    "parse_int",
    "parse_value",
]
