"""Domain Types — logical type tokens and the type-name normalizer.

Invariants:
    - LogicalType is closed: exactly eight canonical tokens
    - normalize_type() is case-insensitive and never raises
    - Unknown tokens pass through normalize_type() unchanged; dispatch rejects them

Design Decisions:
    - str Enum: members compare equal to their token (ADR: schemas stay plain dicts)
    - Alias table over a switch: every alias visible in one place
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

FieldName = NewType("FieldName", str)
RecordTypeKey = NewType("RecordTypeKey", str)


# ─── Enums ───────────────────────────────────────────────────────

class LogicalType(str, Enum):
    """Canonical logical types the coercion registry dispatches on."""
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    DATE = "date"
    DATE_TIME = "date_time"
    TIMESTAMP = "timestamp"


TEMPORAL_TYPES = frozenset({
    LogicalType.DATE, LogicalType.DATE_TIME, LogicalType.TIMESTAMP,
})

TYPE_ALIASES: dict[str, LogicalType] = {
    "bool": LogicalType.BOOLEAN,
    "int": LogicalType.INTEGER,
    "double": LogicalType.FLOAT,
    "datetime": LogicalType.DATE_TIME,
}

DEFAULT_FIELD_TYPE = LogicalType.STRING.value


def normalize_type(token: str) -> str:
    """Map a loose type token to its canonical name. Pure, no IO.

    Tokens outside the alias table pass through lowercased.
    """
    lowered = str(token).strip().lower()
    alias = TYPE_ALIASES.get(lowered)
    if alias is not None:
        return alias.value
    return lowered


def is_known_type(token: str) -> bool:
    """True iff the token (or its alias) names a canonical LogicalType."""
    return normalize_type(token) in LogicalType._value2member_map_
