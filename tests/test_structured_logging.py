"""
Tests for the structured JSON logging.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.structured_logging import (
    JsonFormatter,
    get_logger,
    get_trace_id,
    set_request_context,
)


def _record(message="hello", level=logging.INFO, context=None):
    record = logging.LogRecord("fleet.test", level, __file__, 10, message, None, None)
    if context is not None:
        record.context = context
    return record


def test_formatter_emits_json_with_request_context():
    set_request_context("trace-abc", vehicle_id="VIN123")
    formatter = JsonFormatter(service="fleet-telemetry", environment="testing")

    data = json.loads(formatter.format(_record()))

    assert data["message"] == "hello"
    assert data["level"] == "info"
    assert data["service"] == "fleet-telemetry"
    assert data["environment"] == "testing"
    assert data["trace_id"] == "trace-abc"
    assert data["vehicle_id"] == "VIN123"
    assert data["logger"] == "fleet.test"


def test_formatter_omits_vehicle_when_unset():
    set_request_context("trace-xyz")

    data = json.loads(JsonFormatter().format(_record()))

    assert "vehicle_id" not in data
    assert get_trace_id() == "trace-xyz"


def test_formatter_sanitizes_context():
    when = datetime(2026, 3, 1, tzinfo=timezone.utc)
    record = _record(context={"at": when, "counts": (1, 2), "nested": {"ok": True}})

    data = json.loads(JsonFormatter().format(record))

    assert data["context"]["at"] == when.isoformat()
    assert data["context"]["counts"] == [1, 2]
    assert data["context"]["nested"] == {"ok": True}


def test_errors_carry_source_location():
    data = json.loads(JsonFormatter().format(_record(level=logging.ERROR)))

    assert data["source"]["line"] == 10


def test_context_logger_attaches_context(caplog):
    logger = get_logger("fleet.test.context")

    with caplog.at_level(logging.INFO, logger="fleet.test.context"):
        logger.info("Telemetry ingested", context={"alerts_generated": 2})

    assert caplog.records[-1].context == {"alerts_generated": 2}
