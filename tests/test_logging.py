"""Tests for structured logging and secret masking."""

import json
import logging
import sys

from glue_reverse.logging import (
    MASK,
    StructuredJSONFormatter,
    get_logger,
    log_connection_info,
    log_progress,
    mask_hidden_keys,
    setup_logging,
)


def _record(message="hello", **extra):
    record = logging.LogRecord("glue_reverse.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredJSONFormatter:
    """Tests for the JSON formatter."""

    def test_basic_fields(self):
        data = json.loads(StructuredJSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "hello"
        assert "timestamp" in data

    def test_catalog_fields(self):
        record = _record(
            event_type="progress",
            container_name="sales",
            entity_name="orders",
            extra_data={"attempt": 1},
        )

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["event_type"] == "progress"
        assert data["container_name"] == "sales"
        assert data["entity_name"] == "orders"
        assert data["attempt"] == 1

    def test_exception_stack(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "glue_reverse", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        data = json.loads(StructuredJSONFormatter().format(record))

        assert "RuntimeError: boom" in data["stack"]

    def test_redaction(self):
        record = _record(extra_data={"secret_access_key": "abc123", "session_token": "tok"})

        output = StructuredJSONFormatter(redact_secrets=True).format(record)

        assert "abc123" not in output
        assert "tok\"" not in output
        assert MASK in output

    def test_no_redaction_by_default(self):
        record = _record(extra_data={"secret_access_key": "abc123"})

        assert "abc123" in StructuredJSONFormatter().format(record)


def test_mask_hidden_keys():
    masked = mask_hidden_keys(
        {"accessKeyId": "AKIA", "secretAccessKey": "s", "sessionToken": "", "region": "x"}
    )

    assert masked == {
        "accessKeyId": "AKIA",
        "secretAccessKey": MASK,
        "sessionToken": "",
        "region": "x",
    }


def test_log_connection_info_masks_secrets(caplog):
    logger = get_logger("glue_reverse.test")

    with caplog.at_level(logging.INFO, logger="glue_reverse"):
        log_connection_info(
            logger, "Test connection", {"secret_access_key": "abc", "region": "us-east-1"}
        )

    record = caplog.records[-1]
    assert record.message == "Test connection"
    assert record.extra_data["connection_info"]["secret_access_key"] == MASK


def test_log_progress(caplog):
    logger = get_logger("glue_reverse.test")

    with caplog.at_level(logging.INFO, logger="glue_reverse"):
        log_progress(logger, "Getting table data", "sales", "orders")
        log_progress(logger, "Listing tables", "hr")

    first, second = caplog.records[-2:]
    assert (first.container_name, first.entity_name) == ("sales", "orders")
    assert second.event_type == "progress"
    assert not hasattr(second, "entity_name")


def test_setup_logging_replaces_handlers():
    logger = setup_logging(level="DEBUG", redact_secrets=True)
    setup_logging(level="WARNING")

    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, StructuredJSONFormatter)
