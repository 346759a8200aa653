"""
Tests for logger setup.
"""
import logging

from mycerti.config import settings
from mycerti.utils.logger import configure_logger, logger


def test_app_logger_outside_development():
    assert logger.name == "mycerti"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_explicit_level():
    configured = configure_logger("mycerti.tests.explicit", "warning")
    assert configured.level == logging.WARNING


def test_level_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "log_level", "ERROR")
    assert configure_logger("mycerti.tests.settings").level == logging.ERROR


def test_reconfiguring_does_not_duplicate_handlers():
    configure_logger("mycerti.tests.repeat", "INFO")
    configured = configure_logger("mycerti.tests.repeat", "DEBUG")
    assert configured.level == logging.DEBUG
    assert len(configured.handlers) == 1
