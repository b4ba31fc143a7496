"""
Logging Configuration Tests
"""

import logging

import pytest

from app.core.config import settings
from app.core.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_quiet_loggers_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "quiet_loggers", ["chat_relay_test.noisy"])
    monkeypatch.setattr(settings, "log_level", "DEBUG")

    configure_logging()

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("chat_relay_test.noisy").level == logging.WARNING
    assert logging.getLogger("orchestration.router").getEffectiveLevel() == logging.DEBUG


def test_single_stdout_handler_uses_configured_format(monkeypatch):
    monkeypatch.setattr(settings, "log_format", "[%(name)s] %(message)s")

    configure_logging()
    configure_logging()

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].formatter._fmt == "[%(name)s] %(message)s"
