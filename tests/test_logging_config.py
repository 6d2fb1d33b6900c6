"""
Tests for logging setup.
"""

import logging
from unittest.mock import patch

from file_sorter.utils.logging_config import DEFAULT_FORMAT, setup_logging


class TestSetupLogging:
    def test_console_only(self):
        with patch("logging.basicConfig") as basic_config:
            setup_logging("debug")

        kwargs = basic_config.call_args.kwargs
        assert kwargs["level"] == logging.DEBUG
        assert kwargs["format"] == DEFAULT_FORMAT
        assert len(kwargs["handlers"]) == 1
        assert isinstance(kwargs["handlers"][0], logging.StreamHandler)

    def test_with_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "file_sorter.log"

        with patch("logging.basicConfig") as basic_config:
            setup_logging("INFO", log_file=log_file)

        handlers = basic_config.call_args.kwargs["handlers"]
        file_handlers = [h for h in handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert log_file.parent.is_dir()

        for handler in file_handlers:
            handler.close()
