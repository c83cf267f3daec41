"""
Tests for observability — logging setup and level resolution.
"""

import logging
from pathlib import Path

import pytest

from gmx_installer.core.observability.logging_config import (
    resolve_level,
    setup_from_env,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags_win(self, monkeypatch):
        monkeypatch.setenv("GMXI_LOG_LEVEL", "ERROR")
        assert resolve_level(debug=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_debug_beats_verbose(self):
        assert resolve_level(verbose=True, debug=True) == "DEBUG"

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("GMXI_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("GMXI_LOG_LEVEL", raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_file_output(self, tmp_path: Path):
        log_file = tmp_path / "install.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("gmx_installer.test").debug("probe detail")
        for h in root.handlers:
            h.flush()
        assert "probe detail" in log_file.read_text()

    def test_file_from_env(self, tmp_path: Path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("GMXI_LOG_FILE", str(log_file))
        monkeypatch.delenv("GMXI_LOG_FILE_LEVEL", raising=False)
        setup_from_env("INFO")
        assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
