"""Structured Logging — verifies the JSON formatter surfaces lifecycle fields."""

import json
import logging

from app.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "app.services.lifecycle_coordinator", logging.INFO, __file__, 1,
        "Application pending -> approved", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_lifecycle_extras_included():
    line = json.loads(JSONFormatter().format(_record(
        application_id="a-1", from_status="pending", to_status="approved", cascaded=2,
    )))
    assert line["message"] == "Application pending -> approved"
    assert line["level"] == "INFO"
    assert line["cascaded"] == 2
    assert line["to_status"] == "approved"


def test_absent_extras_omitted():
    line = json.loads(JSONFormatter().format(_record()))
    assert "application_id" not in line
    assert "error_code" not in line


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = len(root.handlers)
    setup_logging("debug", "text")
    setup_logging("info", "json")
    try:
        assert len(root.handlers) == before + 1
        assert root.level == logging.INFO
        assert isinstance(root.handlers[-1].formatter, JSONFormatter)
    finally:
        root.removeHandler(root.handlers[-1])
