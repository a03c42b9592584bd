"""Tests for logging setup and URL redaction."""

import logging
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler

import colorlog

from subsonic_client.logger import redact_url, setup_logging


@contextmanager
def isolated_root_logger():
    """Temporarily run with a root logger that has no handlers."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


class TestRedactUrl:

    def test_password_is_masked(self):
        url = "https://music.example.com/rest/ping.view?u=admin&p=secret&c=subsonic-client&v=1.8.0&f=json"

        assert redact_url(url) == (
            "https://music.example.com/rest/ping.view?u=admin&p=***&c=subsonic-client&v=1.8.0&f=json"
        )

    def test_encoded_password_is_masked(self):
        redacted = redact_url("https://music.example.com/rest/stream.view?u=admin&p=enc%3A736563726574&id=1")

        assert "736563726574" not in redacted
        assert redacted.endswith("&id=1")

    def test_url_without_query(self):
        assert redact_url("https://music.example.com") == "https://music.example.com"


class TestSetupLogging:

    def test_console_handler(self, monkeypatch):
        monkeypatch.delenv("SUBSONIC_LOG_FILE", raising=False)
        monkeypatch.setenv("SUBSONIC_LOG_LEVEL", "warning")

        with isolated_root_logger() as root:
            setup_logging()

            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, colorlog.ColoredFormatter)

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("SUBSONIC_LOG_LEVEL", "ERROR")
        monkeypatch.delenv("SUBSONIC_LOG_FILE", raising=False)

        with isolated_root_logger() as root:
            setup_logging("DEBUG")

            assert root.level == logging.DEBUG

    def test_rotating_file_handler(self, monkeypatch, tmp_path):
        log_file = tmp_path / "subsonic.log"
        monkeypatch.setenv("SUBSONIC_LOG_FILE", str(log_file))
        monkeypatch.setenv("LOG_FILE_MAX_BYTES", "2048")
        monkeypatch.setenv("LOG_FILE_BACKUP_COUNT", "2")

        with isolated_root_logger() as root:
            setup_logging("INFO")
            file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]

            assert len(file_handlers) == 1
            assert file_handlers[0].maxBytes == 2048
            assert file_handlers[0].backupCount == 2

    def test_existing_handlers_are_kept(self, monkeypatch):
        monkeypatch.delenv("SUBSONIC_LOG_FILE", raising=False)

        with isolated_root_logger() as root:
            existing = logging.NullHandler()
            root.addHandler(existing)

            setup_logging("INFO")

            assert root.handlers == [existing]
