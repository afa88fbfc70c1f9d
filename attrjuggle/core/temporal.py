"""Temporal Coercion — the three encodings of "moment in time".

Invariants:
    - as_datetime() returns an existing datetime unchanged (identity, not a copy)
    - Naive input (text without offset, dates) is anchored to the supplied tz
    - date_time text is always YYYY-MM-DD HH:MM:SS in the record zone; aware moments are
      converted to it first, so re-parsing the text yields the same moment
    - timestamp is integer epoch seconds, floored (sub-second precision dropped)
    - Unparsable input raises CoercionError, never a default moment

Design Decisions:
    - stdlib datetime/zoneinfo as the temporal value type: every ORM and driver
      already speaks it (ADR: no extra temporal abstraction)
    - Digit text (optionally with a fraction) is read as epoch seconds before ISO
      parsing, so "1700000000" never parses as a compact ISO date
"""

import math
import re
from datetime import date, datetime, timezone, tzinfo
from typing import Any

from attrjuggle.core.errors import CoercionError

DATE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_EPOCH_TEXT = re.compile(r"-?\d+(\.\d+)?")


def as_datetime(value: Any, tz: tzinfo = timezone.utc, logical_type: str = "date") -> datetime:
    """Build a datetime from text, epoch numbers, dates or datetimes. Pure, no IO."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=tz)
    if isinstance(value, bool):
        raise CoercionError(value, logical_type, "booleans are not moments in time")
    if isinstance(value, (int, float)):
        return _from_epoch(value, tz, logical_type)
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CoercionError(value, logical_type, "bytes are not UTF-8 text") from e
    if isinstance(value, str):
        return _parse_text(value, tz, logical_type)
    raise CoercionError(
        value, logical_type, f"unsupported type {type(value).__name__}",
    )


def to_date_time_string(value: Any, tz: tzinfo = timezone.utc) -> str:
    """Render any temporal input as 'YYYY-MM-DD HH:MM:SS'."""
    moment = as_datetime(value, tz, "date_time")
    return in_zone(moment, tz).strftime(DATE_TIME_FORMAT)


def to_timestamp(value: Any, tz: tzinfo = timezone.utc) -> int:
    """Render any temporal input as integer epoch seconds."""
    moment = as_datetime(value, tz, "timestamp")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    return math.floor(moment.timestamp())


def in_zone(moment: datetime, tz: tzinfo) -> datetime:
    """Express an aware moment in tz; naive moments are already read as tz."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz)


def _from_epoch(seconds: int | float, tz: tzinfo, logical_type: str) -> datetime:
    if isinstance(seconds, float) and not math.isfinite(seconds):
        raise CoercionError(seconds, logical_type, "epoch seconds must be finite")
    try:
        return datetime.fromtimestamp(seconds, tz=tz)
    except (OverflowError, OSError, ValueError) as e:
        raise CoercionError(seconds, logical_type, "epoch seconds out of range") from e


def _parse_text(text: str, tz: tzinfo, logical_type: str) -> datetime:
    stripped = text.strip()
    if not stripped:
        raise CoercionError(text, logical_type, "empty text is not a moment in time")
    if _EPOCH_TEXT.fullmatch(stripped):
        number = float(stripped) if "." in stripped else int(stripped)
        return _from_epoch(number, tz, logical_type)
    try:
        parsed = datetime.fromisoformat(stripped)
    except ValueError as e:
        raise CoercionError(text, logical_type, "unparsable temporal text") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed
