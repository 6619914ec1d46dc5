"""Structured Logging — tests for the JSON formatter.

Tests cover:
    - base fields always present
    - known extras surfaced as strings, unknown extras ignored
    - exceptions rendered into the "exception" field
"""

import json
import sys
import logging
from uuid import uuid4

from shoplist.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("shoplist.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    record.__dict__.update(extra)
    return record


def test_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "shoplist.test"
    assert log["message"] == "hello x"
    assert "timestamp" in log


def test_extras():
    list_id = uuid4()
    log = json.loads(JSONFormatter().format(_record(list_id=list_id, secret="nope")))
    assert log["list_id"] == str(list_id)
    assert "secret" not in log


def test_exception_rendered():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    log = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in log["exception"]
