"""Tests for logging configuration."""

import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

from statement_ledger.services.logging import get_log_level, setup_logging


class TestStatementLogging:
    """Test statement logging configuration."""

    def setup_method(self):
        """Save original handlers before each test."""
        self.root_logger = logging.getLogger()
        self.original_handlers = self.root_logger.handlers.copy()
        self.original_level = self.root_logger.level

    def teardown_method(self):
        """Restore original handlers after each test."""
        for handler in self.root_logger.handlers[:]:
            handler.close()
            self.root_logger.removeHandler(handler)
        for handler in self.original_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self.original_level)

    def test_setup_logging_creates_log_directory(self) -> None:
        """Verify setup_logging creates the log directory if missing."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "logs" / "statement.log"
            assert not log_file.parent.exists()

            setup_logging(str(log_file))

            assert log_file.parent.exists()

    def test_setup_logging_creates_stdout_and_file_handlers(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_logging(str(Path(temp_dir) / "statement.log"))

            handler_types = {type(handler) for handler in self.root_logger.handlers}
            assert len(self.root_logger.handlers) == 2
            assert logging.FileHandler in handler_types
            assert logging.StreamHandler in handler_types

    def test_setup_logging_writes_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "statement.log"
            setup_logging(str(log_file), level_name="INFO")

            logging.getLogger("statement_ledger.test").info("Statement built")
            for handler in self.root_logger.handlers:
                handler.flush()

            content = log_file.read_text()
            assert "statement_ledger.test - INFO - Statement built" in content

    def test_level_name_overrides_environment(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict("os.environ", {"LOG_LEVEL": "ERROR"}):
                setup_logging(str(Path(temp_dir) / "statement.log"), level_name="DEBUG")

            assert self.root_logger.level == logging.DEBUG


class TestGetLogLevel:
    """Test log level resolution."""

    def test_default_is_info(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            assert get_log_level() == logging.INFO

    def test_reads_environment(self) -> None:
        with patch.dict("os.environ", {"LOG_LEVEL": "debug"}):
            assert get_log_level() == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert get_log_level("VERBOSE") == logging.INFO
