"""Tests for logging configuration module."""

import logging
import sys

import structlog
from subway.core.logging import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_sets_log_level(self) -> None:
        """Test that configure_logging sets the root logger level."""
        configure_logging(log_level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

        configure_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

        configure_logging(log_level="ERROR")
        assert logging.getLogger().level == logging.ERROR

    def test_configure_logging_default_level_is_info(self) -> None:
        """Test that default log level is INFO."""
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_case_insensitive(self) -> None:
        """Test that log level is case insensitive."""
        configure_logging(log_level="info")
        assert logging.getLogger().level == logging.INFO

        configure_logging(log_level="Debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_sets_noisy_loggers_to_warning(self) -> None:
        """Test that noisy third-party loggers are set to WARNING level."""
        configure_logging(log_level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("aiosqlite").level == logging.WARNING
        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_configure_logging_clears_existing_handlers(self) -> None:
        """Test that configure_logging replaces existing root logger handlers."""
        root_logger = logging.getLogger()
        dummy_handler = logging.StreamHandler()
        root_logger.addHandler(dummy_handler)

        configure_logging()

        assert dummy_handler not in root_logger.handlers
        assert len(root_logger.handlers) == 1

    def test_configure_logging_handler_outputs_to_stdout(self) -> None:
        """Test that the StreamHandler outputs to stdout with a structlog formatter."""
        configure_logging()

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream == sys.stdout
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_structlog_events_reach_stdout(self, capsys) -> None:
        """Structlog events should be rendered through the stdlib handler."""
        configure_logging(log_level="DEBUG")
        logger = structlog.get_logger("subway.test")

        logger.info("section_added", distance=3)

        output = capsys.readouterr().out
        assert "section_added" in output
        assert '"distance": 3' in output
