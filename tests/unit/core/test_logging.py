"""Unit tests for logging setup."""

from logging.handlers import QueueHandler
from pathlib import Path

from matilda_talk.core.logging import LogSettings, setup_logging, shutdown_logging


def test_setup_logging_is_idempotent():
    first = setup_logging("matilda_talk.tests.idempotent", log_level="DEBUG")
    handlers = list(first.handlers)

    second = setup_logging("matilda_talk.tests.idempotent", log_level="INFO")

    assert first is second
    assert second.handlers == handlers
    assert not second.propagate


def test_loggers_share_one_queue():
    first = setup_logging("matilda_talk.tests.shared_a")
    second = setup_logging("matilda_talk.tests.shared_b")

    assert isinstance(first.handlers[0], QueueHandler)
    assert first.handlers[0].queue is second.handlers[0].queue


def test_settings_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("MATILDA_TALK_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("MATILDA_LOG_MAX_BYTES", "2048")
    monkeypatch.setenv("MATILDA_LOG_BACKUP_COUNT", "not-a-number")
    monkeypatch.setenv("MATILDA_TALK_CONSOLE_LOGS", "yes")

    settings = LogSettings.from_env()

    assert settings.log_path == tmp_path / "matilda-talk.log"
    assert settings.max_bytes == 2048
    assert settings.backup_count == 5
    assert settings.console


def test_shared_log_dir_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("MATILDA_LOG_DIR", str(tmp_path / "shared"))
    monkeypatch.setenv("MATILDA_TALK_LOG_DIR", str(tmp_path / "talk"))

    assert LogSettings.from_env().log_dir == Path(tmp_path / "shared")


def test_shutdown_logging_can_repeat():
    shutdown_logging()
    shutdown_logging()
