"""Tests for the trellis logging helpers."""

from __future__ import annotations

import logging

import pytest

from trellis.core.config import ExtractionConfig
from trellis.utils.logger import ROOT_LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestGetLogger:
    def test_module_name_kept(self):
        assert get_logger("trellis.extraction.streaming").name == "trellis.extraction.streaming"

    def test_foreign_name_nested(self):
        assert get_logger("myapp").name == "trellis.myapp"

    def test_root(self):
        assert get_logger("trellis").name == "trellis"


class TestSetupLogging:
    def test_console_handler_and_level(self, clean_root_logger):
        logger = setup_logging("debug")
        assert logger is clean_root_logger
        assert logger.level == logging.DEBUG
        installed = [h for h in logger.handlers if getattr(h, "_trellis_handler", False)]
        assert len(installed) == 1

    def test_repeat_calls_replace_handlers(self, clean_root_logger):
        setup_logging()
        setup_logging()
        installed = [h for h in clean_root_logger.handlers if getattr(h, "_trellis_handler", False)]
        assert len(installed) == 1

    def test_file_logging(self, clean_root_logger, tmp_path):
        log_dir = tmp_path / "logs"
        logger = setup_logging("INFO", log_dir=str(log_dir))
        get_logger("tests").info("hello file")
        for handler in logger.handlers:
            handler.flush()
        assert "hello file" in (log_dir / "trellis.log").read_text(encoding="utf-8")


class TestConfigureLogging:
    def test_config_applies_level(self, clean_root_logger):
        logger = ExtractionConfig(log_level="warning").configure_logging()
        assert logger is clean_root_logger
        assert logger.level == logging.WARNING
