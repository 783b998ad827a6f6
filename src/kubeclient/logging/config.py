"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

# Log file configuration
LOG_DIR = Path(
    os.environ.get("KUBECLIENT_LOG_DIR", Path.home() / ".local" / "state" / "kubeclient")
)
LOG_FILE_NAME = "kubeclient.log"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3
RETENTION_DAYS = 14

# Handlers installed by configure_logging, replaced on reconfiguration.
_installed_handlers: list[logging.Handler] = []


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _cleanup_old_logs(log_dir: Path) -> None:
    """Delete log files older than RETENTION_DAYS."""
    cutoff = datetime.now() - timedelta(days=RETENTION_DAYS)
    for log_file in log_dir.glob(f"{LOG_FILE_NAME}*"):
        try:
            if datetime.fromtimestamp(log_file.stat().st_mtime) < cutoff:
                log_file.unlink()
        except OSError:
            continue


def _file_handler(log_dir: Path) -> logging.Handler | None:
    """Create a rotating JSON file handler, or None if the directory is unusable."""
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        _cleanup_old_logs(log_dir)
        handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
        )
    except OSError as e:
        print(f"kubeclient: file logging disabled ({e})", file=sys.stderr)
        return None

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
    file_logging: bool = True,
) -> None:
    """Configure structured logging for the application.

    Console logs go to stderr so command output on stdout stays clean. File
    logs are JSON, written to ``LOG_DIR/kubeclient.log`` with rotation and
    retention cleanup. Calling this again replaces the handlers it installed.

    Args:
        verbose: Enable verbose (INFO level) output.
        debug: Enable debug mode (DEBUG level).
        json_output: Output console logs in JSON format.
        file_logging: Also write JSON logs under LOG_DIR.
    """
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    shared_processors = _shared_processors()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if file_logging else log_level
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )

    handlers: list[logging.Handler] = [console_handler]
    if file_logging and (file_handler := _file_handler(LOG_DIR)) is not None:
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers[:] = handlers

    root_logger.setLevel(logging.DEBUG)  # handlers filter
    for handler in handlers:
        root_logger.addHandler(handler)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a configured logger with optional initial context.

    Args:
        name: Logger name.
        **initial_context: Context variables to bind to the logger.

    Returns:
        A bound structlog logger.
    """
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
