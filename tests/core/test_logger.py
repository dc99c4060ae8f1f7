"""Tests for logging setup."""

import logging

import pytest

from locale_bundle.core.config import LoggingConfig
from locale_bundle.core.logger import UnifiedFormatter, setup_logging, setup_logging_from_config


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_console_handler_installed(self, restore_root_logger):
        """Test console handler installed."""
        root = setup_logging(level="debug")
        assert root is restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, UnifiedFormatter)

    def test_unknown_level_defaults_to_info(self, restore_root_logger):
        """Test unknown level defaults to info."""
        root = setup_logging(level="chatty")
        assert root.level == logging.INFO

    def test_file_handler_writes_records(self, restore_root_logger, tmp_path):
        """Test file handler writes records."""
        log_file = tmp_path / "logs" / "locale.log"
        setup_logging(level="INFO", log_file=str(log_file))

        logging.getLogger("locale_bundle.test").info("seeded 3 localizations")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "[INFO] [locale_bundle.test] seeded 3 localizations" in content

    def test_setup_from_config(self, restore_root_logger, tmp_path):
        """Test setup from config."""
        config = LoggingConfig(level="WARNING", file=str(tmp_path / "bundle.log"))
        root = setup_logging_from_config(config)
        assert root.level == logging.WARNING
        assert len(root.handlers) == 2


class TestUnifiedFormatter:
    """Test suite for the timestamp format."""

    def test_millisecond_timestamp(self):
        """Test millisecond timestamp."""
        formatter = UnifiedFormatter(fmt="%(asctime)s %(message)s")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
        record.created = 0
        record.msecs = 42
        formatted = formatter.format(record)
        assert formatted.endswith(".042 hello")
