import logging
from unittest.mock import patch

from songslides import log


def test_configure_logging_sets_level(monkeypatch):
    monkeypatch.setattr(log, "_configured", False)
    with patch("songslides.log.logging.basicConfig") as basic_config:
        log.configure_logging("debug")
    _, kwargs = basic_config.call_args
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["format"] == log.LOG_FORMAT


def test_configure_logging_defaults_to_warning(monkeypatch):
    monkeypatch.setattr(log, "_configured", False)
    with patch("songslides.log.logging.basicConfig") as basic_config:
        log.configure_logging()
    assert basic_config.call_args.kwargs["level"] == logging.WARNING


def test_configure_logging_runs_once(monkeypatch):
    monkeypatch.setattr(log, "_configured", False)
    with patch("songslides.log.logging.basicConfig") as basic_config:
        log.configure_logging("INFO")
        log.configure_logging("DEBUG")
    basic_config.assert_called_once()
