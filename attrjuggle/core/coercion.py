"""Coercion Registry — closed dispatch from LogicalType to a coercion routine.

Invariants:
    - COERCERS has exactly one routine per LogicalType member (no plugins)
    - Unknown type tokens raise UnknownCoercionTypeError, never pass through
    - juggle() short-circuits None before any dispatch
    - Every routine is idempotent: coerce(t, coerce(t, v)) == coerce(t, v)
    - Malformed values raise CoercionError, never a silent default

Design Decisions:
    - Explicit dict over getattr(f"juggle_{type}"): every mapping visible in one place
      (ADR: no convention-over-config)
    - Boolean/string rules match rows written by loosely typed producers, so they
      read back identically ("0" is False, True renders as "1")
    - Numeric text that is not a number is an error rather than 0: a malformed
      stored value signals upstream corruption
"""

import json
import math
import re
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Any, Callable

from attrjuggle.core.domain_types import (
    LogicalType, TEMPORAL_TYPES, normalize_type,
)
from attrjuggle.core.errors import CoercionError, UnknownCoercionTypeError
from attrjuggle.core.temporal import (
    DATE_TIME_FORMAT, as_datetime, in_zone, to_date_time_string, to_timestamp,
)

_NUMERIC_TEXT = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INTEGER_TEXT = re.compile(r"[+-]?\d+")
_FALSY_TEXT = frozenset({"", "0"})
_COLLECTIONS = (list, tuple, dict, set, frozenset)
# Routines that read the record zone
_ZONED_TYPES = TEMPORAL_TYPES | {LogicalType.STRING}


# ─── Primitive routines ──────────────────────────────────────────

def to_boolean(value: Any) -> bool:
    """0, "0", "", False and empty collections are False; all else True."""
    if isinstance(value, str):
        return value not in _FALSY_TEXT
    if isinstance(value, bytes):
        return value not in (b"", b"0")
    if isinstance(value, _COLLECTIONS):
        return len(value) > 0
    return bool(value)


def to_integer(value: Any) -> int:
    """Truncate toward zero; numeric text in int, decimal or exponent form."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        return _truncate(value, value, "integer")
    if isinstance(value, bytes):
        value = _decode(value, "integer")
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_TEXT.fullmatch(text):
            return int(text)
        if _NUMERIC_TEXT.fullmatch(text):
            return _truncate(float(text), value, "integer")
        raise CoercionError(value, "integer", "not numeric text")
    raise CoercionError(value, "integer", f"unsupported type {type(value).__name__}")


def to_float(value: Any) -> float:
    if isinstance(value, (bool, int, float, Decimal)):
        return float(value)
    if isinstance(value, bytes):
        value = _decode(value, "float")
    if isinstance(value, str):
        text = value.strip()
        if _NUMERIC_TEXT.fullmatch(text):
            return float(text)
        raise CoercionError(value, "float", "not numeric text")
    raise CoercionError(value, "float", f"unsupported type {type(value).__name__}")


def to_string(value: Any, tz: tzinfo = timezone.utc) -> str:
    """Stringify: True -> "1", False -> "", 7.0 -> "7"; datetimes in tz."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float):
        return _float_text(value)
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return in_zone(value, tz).strftime(DATE_TIME_FORMAT)
    if isinstance(value, bytes):
        return _decode(value, "string")
    if isinstance(value, _COLLECTIONS):
        raise CoercionError(value, "string", "collections have no text form")
    return str(value)


def to_array(value: Any) -> list | dict:
    """Lists and dicts pass through; JSON text is decoded; scalars are wrapped."""
    if isinstance(value, (list, dict)):
        return value
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    if isinstance(value, (str, bytes)):
        decoded = _decode_json_composite(value)
        if decoded is not None:
            return decoded
    return [value]


# ─── Dispatch ────────────────────────────────────────────────────

# ADR: every mapping explicit; adding a type means editing this dict and LogicalType
COERCERS: dict[LogicalType, Callable[..., Any]] = {
    LogicalType.DATE: as_datetime,
    LogicalType.DATE_TIME: to_date_time_string,
    LogicalType.TIMESTAMP: to_timestamp,
    LogicalType.BOOLEAN: to_boolean,
    LogicalType.INTEGER: to_integer,
    LogicalType.FLOAT: to_float,
    LogicalType.STRING: to_string,
    LogicalType.ARRAY: to_array,
}


def coerce(canonical_type: str, value: Any, tz: tzinfo = timezone.utc) -> Any:
    """Dispatch a non-null value to the routine for canonical_type."""
    try:
        logical = LogicalType(canonical_type)
    except ValueError:
        raise UnknownCoercionTypeError(str(canonical_type)) from None
    routine = COERCERS[logical]
    if logical in _ZONED_TYPES:
        return routine(value, tz)
    return routine(value)


def juggle(type_token: str, value: Any, tz: tzinfo = timezone.utc) -> Any:
    """Normalize type_token and coerce value. None is returned untouched."""
    if value is None:
        return None
    return coerce(normalize_type(type_token), value, tz)


# ─── Helpers ─────────────────────────────────────────────────────

def _truncate(number: float | Decimal, original: Any, logical_type: str) -> int:
    if isinstance(number, float) and not math.isfinite(number):
        raise CoercionError(original, logical_type, "not a finite number")
    if isinstance(number, Decimal) and not number.is_finite():
        raise CoercionError(original, logical_type, "not a finite number")
    return int(number)


def _float_text(number: float) -> str:
    if math.isnan(number):
        return "NAN"
    if math.isinf(number):
        return "INF" if number > 0 else "-INF"
    if number.is_integer() and abs(number) < 1e15:
        return str(int(number))
    return repr(number)


def _decode(raw: bytes, logical_type: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CoercionError(raw, logical_type, "bytes are not UTF-8 text") from e


def _decode_json_composite(raw: str | bytes) -> list | dict | None:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    stripped = text.strip()
    if not stripped.startswith(("[", "{")):
        return None
    try:
        decoded = json.loads(stripped)
    except ValueError:
        # Not JSON after all: the caller wraps it as a scalar
        return None
    if isinstance(decoded, (list, dict)):
        return decoded
    return None
