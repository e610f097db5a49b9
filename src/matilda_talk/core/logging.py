"""Centralized logging setup for Matilda Talk.

Library modules log through ``logging.getLogger(__name__)`` and propagate to
the ``matilda_talk`` package logger. The CLI and the talk mode attach that
logger to one process-wide queue, drained on a listener thread into a
rotating log file and, optionally, stderr. stdout is reserved for transcripts.
"""

import atexit
import logging
import os
import sys
import threading
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import SimpleQueue

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_lock = threading.Lock()
_queue: SimpleQueue | None = None
_listener: QueueListener | None = None


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass(frozen=True)
class LogSettings:
    """Where and how much to log, resolved from the environment."""

    log_dir: Path
    filename: str = "matilda-talk.log"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    console: bool = False

    @classmethod
    def from_env(cls) -> "LogSettings":
        env_dir = os.environ.get("MATILDA_LOG_DIR") or os.environ.get("MATILDA_TALK_LOG_DIR")
        console = os.environ.get("MATILDA_TALK_CONSOLE_LOGS", "").strip().lower() in {"1", "true", "yes"}
        return cls(
            log_dir=Path(env_dir) if env_dir else Path.home() / ".matilda" / "logs",
            max_bytes=_env_int("MATILDA_LOG_MAX_BYTES", cls.max_bytes),
            backup_count=_env_int("MATILDA_LOG_BACKUP_COUNT", cls.backup_count),
            console=console,
        )

    @property
    def log_path(self) -> Path:
        return self.log_dir / self.filename


def _file_handler(settings: LogSettings) -> logging.Handler | None:
    """Rotating file handler, or None when the log directory is unusable."""
    try:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            settings.log_path, maxBytes=settings.max_bytes, backupCount=settings.backup_count
        )
    except OSError:
        return None


def _build_handlers(settings: LogSettings, level: int, include_console: bool, include_file: bool) -> list:
    handlers: list[logging.Handler] = []
    if include_file:
        file_handler = _file_handler(settings)
        if file_handler is not None:
            handlers.append(file_handler)
    if include_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def _start_listener(handlers: list) -> SimpleQueue:
    global _queue, _listener
    _queue = SimpleQueue()
    _listener = QueueListener(_queue, *handlers, respect_handler_level=True)
    _listener.start()
    atexit.register(shutdown_logging)
    return _queue


def shutdown_logging() -> None:
    """Flush and stop the listener thread. Safe to call more than once."""
    global _queue, _listener
    with _lock:
        if _listener is not None:
            _listener.stop()
        _listener = None
        _queue = None


def setup_logging(
    module_name: str,
    log_level: str = "INFO",
    include_console: bool | None = None,
    include_file: bool = True,
) -> logging.Logger:
    """Attach a logger to the shared queue.

    Args:
        module_name: Logger name, usually the package name
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        include_console: Also log to stderr. If None, uses MATILDA_TALK_CONSOLE_LOGS.
        include_file: Log to the rotating file under the log directory

    Returns:
        Configured logger instance

    The first call decides the sinks; later calls for other names share them.

    """
    logger = logging.getLogger(module_name)
    if logger.handlers:
        return logger

    level = getattr(logging, log_level.upper())
    logger.setLevel(level)
    # The package logger owns the output; the root logger must not repeat it
    logger.propagate = False

    settings = LogSettings.from_env()
    if include_console is None:
        include_console = settings.console

    with _lock:
        log_queue = _queue
        if log_queue is None:
            handlers = _build_handlers(settings, level, include_console, include_file)
            if handlers:
                log_queue = _start_listener(handlers)

    if log_queue is None:
        logger.addHandler(logging.NullHandler())
        return logger

    queue_handler = QueueHandler(log_queue)
    queue_handler.setLevel(level)
    logger.addHandler(queue_handler)
    return logger


__all__ = ["LogSettings", "setup_logging", "shutdown_logging"]
