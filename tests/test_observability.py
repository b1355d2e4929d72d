"""
Tests for logging configuration.
"""

import logging
from pathlib import Path

import pytest

from src.core.observability.logging_config import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags_win(self):
        env = {"DEVBASE_LOG_LEVEL": "ERROR"}
        assert resolve_level(debug=True, env=env) == "DEBUG"
        assert resolve_level(verbose=True, env=env) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_fallback(self):
        assert resolve_level(env={"DEVBASE_LOG_LEVEL": "INFO"}) == "INFO"

    def test_default(self):
        assert resolve_level(env={}) == "WARNING"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_means_warning(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_file_handler(self, tmp_path: Path):
        log_file = tmp_path / "resolve.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("src.test").debug("scope decision")
        for h in root.handlers:
            h.flush()
        assert "scope decision" in log_file.read_text()
