"""
Unit tests for logging configuration.

Tests cover handler setup, formats, file logging and module-specific levels.
"""

import logging
from pathlib import Path

import pytest

from adhd_todo.core import logging_config
from adhd_todo.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _console_handlers():
    return [
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


class TestSetupLogging:
    """Test setup_logging."""

    @pytest.mark.parametrize(
        "log_level, expected_level",
        [("DEBUG", logging.DEBUG), ("info", logging.INFO), ("WARNING", logging.WARNING), ("ERROR", logging.ERROR)],
    )
    def test_console_level(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)
        assert _console_handlers()[0].level == expected_level

    @pytest.mark.parametrize(
        "log_format, expected_format",
        [("simple", SIMPLE_FORMAT), ("detailed", DETAILED_FORMAT), ("json", JSON_FORMAT)],
    )
    def test_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)
        assert _console_handlers()[0].formatter._fmt == expected_format

    def test_root_logger_captures_everything(self):
        setup_logging(enable_file=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_existing_handlers_are_replaced(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)
        assert len(_console_handlers()) == 1

    def test_file_handler_writes_to_log_dir(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(logging_config, "LOG_FILE_DIR", str(tmp_path / "logs"))
        setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG
        assert (tmp_path / "logs").is_dir()

    def test_module_levels_are_applied(self):
        setup_logging(enable_file=False)
        for module_name, level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == getattr(logging, level)

    def test_third_party_noise_is_reduced(self):
        assert MODULE_LOG_LEVELS["sqlalchemy"] == "WARNING"
        assert MODULE_LOG_LEVELS["httpx"] == "WARNING"


class TestGetLogger:
    """Test get_logger."""

    def test_returns_named_logger(self):
        logger = get_logger("adhd_todo.server.api.v1.tasks")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "adhd_todo.server.api.v1.tasks"

    def test_same_name_same_instance(self):
        assert get_logger("adhd_todo.core.recurrence") is get_logger("adhd_todo.core.recurrence")
