"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from loguru import logger

from project_branch_sync.logging import (
    SYNC_LOG_KEY,
    LogContext,
    bind_org,
    bind_target,
    get_logger,
    reset_logging,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_before() -> None:
    """Start every test from an unconfigured logger."""
    reset_logging()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default_level(self, capsys) -> None:
        """Test default INFO level setup."""
        setup_logging(level="INFO")

        logger.bind(name="test").debug("debug message")
        logger.bind(name="test").info("info message")

        err = capsys.readouterr().err
        assert "debug message" not in err
        assert "info message" in err

    def test_setup_logging_verbose_overrides_level(self) -> None:
        """Test that verbose flag sets DEBUG level."""
        messages: list[str] = []
        setup_logging(level="WARNING", verbose=True)

        handler_id = logger.add(lambda msg: messages.append(str(msg)))
        try:
            logger.bind(name="test").debug("debug message")
            assert any("debug message" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_setup_logging_verbose_takes_precedence(self, capsys) -> None:
        """Test verbose takes precedence over quiet when both set."""
        setup_logging(level="INFO", verbose=True, quiet=True)

        logger.bind(name="test").debug("debug message")

        assert "debug message" in capsys.readouterr().err

    def test_setup_logging_quiet_filters_info(self, capsys) -> None:
        """Test that quiet flag hides INFO on the console."""
        setup_logging(level="DEBUG", quiet=True)

        logger.bind(name="test").info("info message")
        logger.bind(name="test").warning("warning message")

        err = capsys.readouterr().err
        assert "info message" not in err
        assert "warning message" in err

    def test_setup_logging_with_file(self, tmp_path: Path) -> None:
        """Test file logging setup."""
        log_file = tmp_path / "test.log"
        setup_logging(level="INFO", log_file=log_file)

        logger.bind(name="test").info("Test file message")
        reset_logging()  # flush and close the file

        assert log_file.exists()
        assert "Test file message" in log_file.read_text()

    def test_sync_log_records_not_on_console(self, capsys) -> None:
        """Records bound for the sync log files skip the console handlers."""
        setup_logging(level="DEBUG")

        logger.bind(**{SYNC_LOG_KEY: "/tmp/updated-projects.log"}).info("sync record")
        logger.bind(name="test").info("console record")

        err = capsys.readouterr().err
        assert "sync record" not in err
        assert "console record" in err

    def test_console_shows_bound_context(self, capsys) -> None:
        """Org, source and target context is printed after the logger name."""
        setup_logging(level="INFO")

        with LogContext(source="github"):
            bind_target("org-123", "snyk/goof").info("Syncing projects")
        bind_org("org-123").info("Org done")

        lines = capsys.readouterr().err.splitlines()
        assert any("[org-123 github snyk/goof]" in line for line in lines)
        assert any("[org-123]" in line and "Org done" in line for line in lines)


class TestInterceptHandler:
    """Tests for stdlib logging interception."""

    def test_intercept_stdlib_logging(self) -> None:
        """Test that stdlib logging is routed to loguru."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(lambda msg: messages.append(str(msg)))
        try:
            stdlib_logger = logging.getLogger("test_stdlib_intercept")
            stdlib_logger.warning("Hello from stdlib")

            assert any("Hello from stdlib" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_httpx_logging_controlled(self) -> None:
        """Test httpx logger is quiet unless DEBUG."""
        setup_logging(level="INFO")
        assert logging.getLogger("httpx").level >= logging.WARNING

        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.DEBUG


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_binds_name(self) -> None:
        """Test that get_logger binds the module name."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(
            lambda msg: messages.append(str(msg)),
            format="{extra} | {message}",
        )
        try:
            get_logger("my_test_module").info("Test message")
            assert any("my_test_module" in msg for msg in messages)
        finally:
            logger.remove(handler_id)


class TestContextBinding:
    """Tests for context binding helpers."""

    def test_bind_org(self) -> None:
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(
            lambda msg: messages.append(str(msg)),
            format="{extra} | {message}",
        )
        try:
            bind_org("org-123").info("Test org message")
            assert any("org-123" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_bind_target(self) -> None:
        """Test bind_target adds org and target context."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(
            lambda msg: messages.append(str(msg)),
            format="{extra} | {message}",
        )
        try:
            bind_target("org-123", "snyk/goof").info("Test target message")
            output = "".join(messages)
            assert "org-123" in output
            assert "snyk/goof" in output
        finally:
            logger.remove(handler_id)

    def test_log_context_manager(self) -> None:
        """Test LogContext context manager."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(
            lambda msg: messages.append(str(msg)),
            format="{extra} | {message}",
        )
        try:
            with LogContext(source="github"):
                logger.info("Inside context")

            assert any("github" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_log_context_is_scoped(self) -> None:
        """Context bound by LogContext is dropped when the block exits."""
        records: list[dict] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(lambda msg: records.append(dict(msg.record["extra"])))
        try:
            with LogContext(source="github"):
                logger.info("Inside context")
            logger.info("Outside context")

            assert records[0]["source"] == "github"
            assert "source" not in records[1]
        finally:
            logger.remove(handler_id)


class TestResetLogging:
    """Tests for reset_logging function."""

    def test_reset_logging_removes_handlers(self, capsys) -> None:
        """Test that nothing reaches the console after reset_logging."""
        setup_logging(level="INFO")
        reset_logging()

        logger.bind(name="test").warning("after reset")

        assert "after reset" not in capsys.readouterr().err
