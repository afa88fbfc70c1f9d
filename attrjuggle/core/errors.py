"""Error Hierarchy — typed, categorized exceptions for all juggling failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Configuration errors (unknown type, bad schema) are critical and never downgraded
    - Coercion errors carry the offending value's repr, never the value itself
    - to_dict() produces a JSON-safe envelope for logs and callers

Design Decisions:
    - Single hierarchy with JuggleError base: callers catch one type (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    COERCION = "coercion"
    SCHEMA = "schema"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    record_type: str | None = None
    field: str | None = None
    logical_type: str | None = None
    value_repr: str | None = None
    debug_info: dict[str, Any] | None = None


class JuggleError(Exception):
    """Base exception for all attrjuggle errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def with_field(self, record_type: str, field_name: str) -> "JuggleError":
        """Attach record/field identity once the failing field is known."""
        self.context.record_type = record_type
        self.context.field = field_name
        return self

    def to_dict(self) -> dict:
        """Convert to a standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "record_type": self.context.record_type,
                    "field": self.context.field,
                    "logical_type": self.context.logical_type,
                    "value": self.context.value_repr,
                },
            }
        }


# ─── Configuration Errors ───────────────────────────────────────

class UnknownCoercionTypeError(JuggleError):
    """A type token reached dispatch with no registered coercion routine."""
    def __init__(self, type_name: str, context: ErrorContext | None = None):
        context = context or ErrorContext()
        context.logical_type = type_name
        super().__init__(
            f"Unknown coercion type '{type_name}': no coercion routine is registered for it",
            "UNKNOWN_COERCION_TYPE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context,
        )
        self.type_name = type_name


class SchemaError(JuggleError):
    """A schema declaration was rejected at registration time."""
    def __init__(self, message: str, fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_SCHEMA", ErrorCategory.SCHEMA,
            ErrorSeverity.CRITICAL, context,
        )
        self.fields = fields


# ─── Value Errors ───────────────────────────────────────────────

class CoercionError(JuggleError):
    """A value cannot be interpreted under its declared logical type."""
    def __init__(
        self, value: Any, logical_type: str, reason: str,
        context: ErrorContext | None = None,
    ):
        context = context or ErrorContext()
        context.logical_type = logical_type
        context.value_repr = _safe_repr(value)
        super().__init__(
            f"Cannot coerce {context.value_repr} to {logical_type}: {reason}",
            "COERCION_FAILED", ErrorCategory.COERCION,
            ErrorSeverity.ERROR, context,
        )
        self.logical_type = logical_type


def _safe_repr(value: Any, limit: int = 80) -> str:
    text = repr(value)
    if len(text) > limit:
        return text[:limit - 3] + "..."
    return text
