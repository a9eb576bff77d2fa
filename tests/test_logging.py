"""
Tests for the centralized logging setup.
"""

import logging
from unittest.mock import patch

from tgbot.core.config import TestConfig
from tgbot.core.logging import (
    ColorFormatter,
    ContextFilter,
    configure_third_party_loggers,
    get_logger,
    log_exception,
    setup_logging,
)


class TestSetupLogging:

    def test_console_handler_and_level(self, restore_root_logger):
        """Test that setup_logging installs one console handler at the requested level"""
        with patch('tgbot.core.logging.get_config', return_value=TestConfig()):
            root = setup_logging(log_level="warning", app_name="tgbot-tests")

        assert root is logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert any(isinstance(f, ContextFilter) for f in root.handlers[0].filters)

    def test_log_file_handler(self, restore_root_logger, tmp_path):
        """Test that a rotating file handler writes to the given file"""
        log_file = tmp_path / "logs" / "tgbot.log"
        with patch('tgbot.core.logging.get_config', return_value=TestConfig()):
            setup_logging(log_level="INFO", log_file=log_file, app_name="tgbot-tests")

        get_logger("tgbot.test").info("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "written to file" in content
        assert "tgbot-tests" in content

    def test_defaults_come_from_config(self, restore_root_logger):
        """Test that level and app name default to the loaded configuration"""
        with patch('tgbot.core.logging.get_config', return_value=TestConfig()):
            root = setup_logging()

        assert root.level == logging.DEBUG


class TestThirdPartyLoggers:

    def test_debug_keeps_httpx_quiet(self, restore_root_logger):
        """Test that httpx stays at WARNING even in DEBUG mode"""
        configure_third_party_loggers("DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.DEBUG

    def test_info_level(self, restore_root_logger):
        configure_third_party_loggers("INFO")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING


class TestFormatting:

    def test_color_formatter_restores_levelname(self):
        """Test that coloring does not leak into other handlers"""
        formatter = ColorFormatter("%(levelname)s %(message)s")
        record = logging.LogRecord("tgbot", logging.ERROR, __file__, 1, "boom", None, None)

        output = formatter.format(record)

        assert "\033[91m" in output
        assert record.levelname == "ERROR"

    def test_log_exception(self, caplog):
        logger = get_logger("tgbot.test")
        try:
            raise ValueError("bad value")
        except ValueError as e:
            with caplog.at_level(logging.ERROR):
                log_exception(logger, e, "Operation failed")

        assert "Operation failed: ValueError: bad value" in caplog.text
        assert caplog.records[-1].exc_info is not None
