"""Structured Logging — tests for the JSON formatter and setup_logging.

Tests:
    - JSON output carries base fields and juggling extras
    - Exceptions are rendered into the payload
    - setup_logging attaches to the attrjuggle logger, not the root logger
"""

import json
import logging
import sys

from attrjuggle.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "attrjuggle.models.juggling", logging.ERROR, __file__, 1,
        "Coercion of %s failed", ("age",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    payload = json.loads(JSONFormatter().format(
        _record(field="age", logical_type="integer", error_code="COERCION_FAILED"),
    ))
    assert payload["level"] == "ERROR"
    assert payload["message"] == "Coercion of age failed"
    assert payload["field"] == "age"
    assert payload["error_code"] == "COERCION_FAILED"
    assert "record_type" not in payload


def test_json_formatter_renders_exceptions():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    payload = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in payload["exception"]


def test_setup_logging_scopes_to_package_logger():
    logger = logging.getLogger("attrjuggle")
    before = logging.getLogger().handlers[:]
    handler = setup_logging("debug", "text")
    try:
        assert handler in logger.handlers
        assert logger.level == logging.DEBUG
        assert logging.getLogger().handlers == before
        assert not isinstance(handler.formatter, JSONFormatter)
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
