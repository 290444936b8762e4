import logging

import pytest

from utils import log


@pytest.fixture()
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


def test_logger_uses_configured_level(monkeypatch, restore_root_level):
    monkeypatch.setenv("LOG_LEVEL", "warning")

    logger = log.get_logger("tests.level")

    assert logger.level == logging.WARNING
    assert restore_root_level.level == logging.WARNING


def test_level_change_applies_after_first_call(monkeypatch, restore_root_level):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    log.get_logger("tests.first")

    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    log.get_logger("tests.second")

    assert restore_root_level.level == logging.DEBUG


def test_single_root_handler(restore_root_level):
    log.get_logger("tests.a")
    before = len(restore_root_level.handlers)

    log.get_logger("tests.b")

    assert len(restore_root_level.handlers) == before


def test_unknown_level_falls_back_to_info(monkeypatch, restore_root_level):
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    assert log.get_logger("tests.fallback").level == logging.INFO
