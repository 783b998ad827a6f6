"""Unit tests for logging configuration."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
import structlog

from kubeclient.logging import config as log_config
from kubeclient.logging.config import (
    LOG_FILE_NAME,
    RETENTION_DAYS,
    _cleanup_old_logs,
    _file_handler,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def _reset_logging() -> Any:
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    for handler in log_config._installed_handlers:
        handler.close()
    log_config._installed_handlers.clear()
    root.handlers = original_handlers
    structlog.reset_defaults()


def _age(path: Path, days: int) -> None:
    old_time = (datetime.now() - timedelta(days=days)).timestamp()
    os.utime(path, (old_time, old_time))


@pytest.mark.unit
class TestCleanupOldLogs:
    """Tests for _cleanup_old_logs function."""

    def test_deletes_old_log_files(self, tmp_path: Path) -> None:
        """Test log files older than RETENTION_DAYS are deleted."""
        log_file = tmp_path / f"{LOG_FILE_NAME}.1"
        log_file.write_text("old log data")
        _age(log_file, RETENTION_DAYS + 5)

        _cleanup_old_logs(tmp_path)

        assert not log_file.exists()

    def test_keeps_recent_and_unrelated_files(self, tmp_path: Path) -> None:
        """Test recent log files and other files are kept."""
        recent = tmp_path / LOG_FILE_NAME
        recent.write_text("recent")
        unrelated = tmp_path / "notes.txt"
        unrelated.write_text("keep")
        _age(unrelated, RETENTION_DAYS + 5)

        _cleanup_old_logs(tmp_path)

        assert recent.exists()
        assert unrelated.exists()

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test a missing directory is not an error."""
        _cleanup_old_logs(tmp_path / "absent")


@pytest.mark.unit
class TestFileHandler:
    """Tests for the rotating file handler."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        """Test the log directory is created."""
        handler = _file_handler(tmp_path / "nested" / "logs")
        assert handler is not None
        handler.close()
        assert (tmp_path / "nested" / "logs").is_dir()

    def test_unusable_directory(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test file logging is disabled when the directory cannot be created."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        assert _file_handler(blocker / "logs") is None
        assert "file logging disabled" in capsys.readouterr().err


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.parametrize(
        ("kwargs", "level"),
        [
            ({}, logging.WARNING),
            ({"verbose": True}, logging.INFO),
            ({"debug": True}, logging.DEBUG),
            ({"verbose": True, "debug": True}, logging.DEBUG),
        ],
    )
    def test_console_level(self, kwargs: dict[str, bool], level: int) -> None:
        """Test the console handler level follows the flags."""
        configure_logging(file_logging=False, **kwargs)

        (console_handler,) = log_config._installed_handlers
        assert console_handler.level == level

    def test_file_logging_writes_json(self, tmp_path: Path) -> None:
        """Test debug events reach the JSON log file even at the default console level."""
        configure_logging()

        get_logger("tests").debug("file_event", answer=42)
        for handler in log_config._installed_handlers:
            handler.flush()

        lines = (tmp_path / "logs" / LOG_FILE_NAME).read_text().splitlines()
        record = json.loads(lines[-1])
        assert record["event"] == "file_event"
        assert record["answer"] == 42
        assert record["level"] == "debug"

    def test_reconfigure_replaces_handlers(self) -> None:
        """Test calling configure_logging twice does not stack handlers."""
        root = logging.getLogger()
        before = len(root.handlers)

        configure_logging()
        configure_logging(verbose=True)

        assert len(log_config._installed_handlers) == 2
        assert len(root.handlers) == before + 2


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger."""

    def test_binds_initial_context(self, mocker: Any) -> None:
        """Test initial context is bound to the returned logger."""
        base = mocker.Mock()
        mocker.patch("structlog.get_logger", return_value=base)

        logger = get_logger("kubeclient.test", context="dev")

        base.bind.assert_called_once_with(context="dev")
        assert logger is base.bind.return_value

    def test_without_context(self, mocker: Any) -> None:
        """Test no bind happens without initial context."""
        base = mocker.Mock()
        mocker.patch("structlog.get_logger", return_value=base)

        assert get_logger("kubeclient.test") is base
        base.bind.assert_not_called()
