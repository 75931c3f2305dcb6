"""
Unit tests for structured logging configuration.
"""

import json
import logging
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from permit_setup.logging_config import (
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_api_failure,
    log_entity_outcome,
    log_reset_stage,
    set_correlation_id,
    setup_logging,
)


def _read_entries(log_file: Path):
    return [json.loads(line) for line in log_file.read_text().splitlines() if line]


class TestLoggingConfiguration:
    """Test structured logging configuration functionality."""

    def test_setup_logging_with_level(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self, temp_dir: Path):
        """JSON lines carry event, fields, level and timestamp."""
        log_file = temp_dir / "logs" / "setup.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        get_logger("test").info("test_message", key="value")

        entry = _read_entries(log_file)[0]
        assert entry["event"] == "test_message"
        assert entry["key"] == "value"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_setup_logging_human_format(self, temp_dir: Path):
        log_file = temp_dir / "setup.log"
        setup_logging(level="INFO", log_file=log_file, json_format=False)

        get_logger("test").info("test_message", key="value")

        content = log_file.read_text()
        assert "test_message" in content
        assert "key" in content

    def test_level_filters_output(self, temp_dir: Path):
        log_file = temp_dir / "setup.log"
        setup_logging(level="WARNING", log_file=log_file, json_format=True)

        logger = get_logger("test")
        logger.info("quiet")
        logger.warning("loud")

        assert [entry["event"] for entry in _read_entries(log_file)] == ["loud"]

    def test_get_logger_prefixes_name(self, temp_dir: Path):
        log_file = temp_dir / "setup.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        get_logger("flow").info("named")
        get_logger("permit_setup.reset").info("named")

        assert [entry["logger"] for entry in _read_entries(log_file)] == [
            "permit_setup.flow",
            "permit_setup.reset",
        ]


class TestCorrelationId:

    def test_correlation_id_management(self):
        clear_correlation_id()
        assert get_correlation_id() is None

        assert set_correlation_id("run-1") == "run-1"
        assert get_correlation_id() == "run-1"

        clear_correlation_id()
        assert get_correlation_id() is None

    def test_correlation_id_auto_generation(self):
        correlation_id = set_correlation_id()
        assert correlation_id
        assert get_correlation_id() == correlation_id
        clear_correlation_id()

    def test_correlation_id_in_logs(self, temp_dir: Path):
        log_file = temp_dir / "setup.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        set_correlation_id("run-123")
        get_logger("test").info("test_message")
        clear_correlation_id()

        assert _read_entries(log_file)[0]["correlation_id"] == "run-123"


class TestLogHelpers:

    def test_api_rejection_is_a_warning(self):
        with capture_logs() as logs:
            log_api_failure(get_logger("test"), "POST", "/schema/p/e/roles", status=422, reason="bad")

        assert logs == [
            {
                "event": "api_call_failed",
                "log_level": "warning",
                "event_type": "api_call_failed",
                "method": "POST",
                "endpoint": "/schema/p/e/roles",
                "reason": "bad",
                "status": 422,
            }
        ]

    def test_transport_failure_is_an_error(self):
        with capture_logs() as logs:
            log_api_failure(get_logger("test"), "GET", "/health", reason="refused")

        assert logs[0]["log_level"] == "error"
        assert "status" not in logs[0]

    @pytest.mark.parametrize(
        "outcome,event,level",
        [
            ("created", "resource_created", "info"),
            ("exists", "resource_exists", "info"),
            ("absent", "resource_absent", "info"),
            ("failed", "resource_create_failed", "warning"),
        ],
    )
    def test_entity_outcome_event_names(self, outcome, event, level):
        with capture_logs() as logs:
            log_entity_outcome(get_logger("test"), "resource", "invoice", "create", outcome)

        assert logs[0]["event"] == event
        assert logs[0]["log_level"] == level
        assert logs[0]["key"] == "invoice"

    def test_reset_stage_level_depends_on_failures(self):
        logger = get_logger("test")
        with capture_logs() as logs:
            log_reset_stage(logger, "roles", deleted=3, skipped=2, failed=0)
            log_reset_stage(logger, "resources", deleted=1, skipped=1, failed=1)

        assert [entry["log_level"] for entry in logs] == ["info", "warning"]
        assert logs[1]["stage"] == "resources"
        assert logs[1]["skipped"] == 1
