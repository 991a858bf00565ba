"""Tests for settings validation and logging setup."""

import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from proofmark.config import Settings
from proofmark.logging_config import configure_logging


def test_defaults():
    cfg = Settings(_env_file=None)
    assert cfg.expected_languages == ["en"]
    assert cfg.legend_text.split(" ")[4] == "missing-words"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("LLM_MODEL", "tiny-proof")
    monkeypatch.setenv("CIRCUIT_BREAKER_FAILURE_THRESHOLD", "7")
    cfg = Settings(_env_file=None)
    assert cfg.llm_model == "tiny-proof"
    assert cfg.circuit_breaker_failure_threshold == 7


@pytest.mark.parametrize("field", ["llm_max_retries", "circuit_breaker_failure_threshold"])
def test_rejects_zero_limits(field):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: 0})


def test_rejects_empty_languages():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, expected_languages=[])


def test_configure_logging_dev_format():
    with patch("proofmark.logging_config.logging.basicConfig") as basic:
        configure_logging(Settings(_env_file=None, dev_mode=True, log_level="debug"))
    kwargs = basic.call_args.kwargs
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["format"].startswith("%(asctime)s")


def test_configure_logging_json_format():
    with patch("proofmark.logging_config.logging.basicConfig") as basic:
        configure_logging(Settings(_env_file=None, dev_mode=False, log_level="nonsense"))
    kwargs = basic.call_args.kwargs
    assert kwargs["level"] == logging.INFO
    assert kwargs["format"].startswith('{"time"')
