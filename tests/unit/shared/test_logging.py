"""Unit tests for lifecycle_probe.shared.logging module."""

import json
import logging

import pytest
import structlog

from lifecycle_probe.shared.logging import (
    CLIENT_LOGGERS,
    configure_logging,
    get_logger,
    resolve_level,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    logging.basicConfig(force=True, handlers=[logging.NullHandler()])


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_root_level(self):
        configure_logging("debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        configure_logging("chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_log_file_gets_json(self, tmp_path):
        """A log file always gets JSON lines with bound context."""
        log_file = tmp_path / "run.log"
        configure_logging("info", log_file=log_file)

        get_logger("lifecycle_probe.test").bind(step="install").info("step started")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "step started"
        assert record["step"] == "install"
        assert record["level"] == "info"
        assert record["logger"] == "lifecycle_probe.test"

    def test_level_filters_file_output(self, tmp_path):
        log_file = tmp_path / "run.log"
        configure_logging("warning", log_file=log_file)

        get_logger("lifecycle_probe.test").info("quiet")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.read_text() == ""

    @pytest.mark.parametrize(
        "level,expected",
        [("info", logging.WARNING), ("error", logging.ERROR), ("debug", logging.DEBUG)],
    )
    def test_client_libraries_quiet_unless_debug(self, level, expected):
        configure_logging(level)

        for name in CLIENT_LOGGERS:
            assert logging.getLogger(name).level == expected


class TestResolveLevel:
    """Tests for resolve_level."""

    def test_configured_level_without_flags(self):
        assert resolve_level(0, "error") == "error"

    def test_one_flag_is_info(self):
        assert resolve_level(1, "error") == "info"

    def test_two_flags_are_debug(self):
        assert resolve_level(3, "warning") == "debug"
