# tests/test_logging_conf.py
"""
Logging Configuration Tests - Handler Selection and Levels

This module contains unit tests for setup_logging: which root handlers are
installed for stream and file logging, and how level names are resolved.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- storeprice.shared.logging_conf (setup_logging, resolve_level)
- pytest (testing framework, tmp_path fixture)
"""
import pytest  # Testing framework for writing and running tests

import logging
import sys
from logging.handlers import RotatingFileHandler

from storeprice.shared.logging_conf import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_defaults_to_stderr(self):
        assert setup_logging() is None

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr

    def test_stdout_when_requested(self):
        setup_logging(log_stdout=True)

        handlers = logging.getLogger().handlers
        assert [h.stream for h in handlers] == [sys.stdout]

    def test_log_dir_creates_rotating_file(self, tmp_path):
        path = setup_logging(log_dir=tmp_path / "logs", max_bytes=1024, backup_count=2)

        assert path == tmp_path / "logs" / "storeprice.log"
        assert path.parent.is_dir()
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert handlers[0].maxBytes == 1024
        assert handlers[0].backupCount == 2

    def test_log_file_with_stdout(self, tmp_path):
        path = setup_logging(log_file=tmp_path / "app.log", log_stdout=True)

        assert path == tmp_path / "app.log"
        kinds = [type(h) for h in logging.getLogger().handlers]
        assert kinds == [RotatingFileHandler, logging.StreamHandler]

    def test_level_name(self):
        setup_logging(level="debug")
        assert logging.getLogger().level == logging.DEBUG


class TestResolveLevel:
    def test_names_and_numbers(self):
        assert resolve_level("warning") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_name_is_info(self):
        assert resolve_level("chatty") == logging.INFO
