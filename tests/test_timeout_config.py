"""Tests for timeout configuration."""

import logging

from pgfirewall.timeout_config import Timeouts, _get_timeout, log_timeout_event


class TestGetTimeout:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("PGFW_TEST_TIMEOUT", raising=False)

        assert _get_timeout("PGFW_TEST_TIMEOUT", 42) == 42

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PGFW_TEST_TIMEOUT", "120")

        assert _get_timeout("PGFW_TEST_TIMEOUT", 42) == 120

    def test_non_integer_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("PGFW_TEST_TIMEOUT", "soon")

        with caplog.at_level(logging.WARNING):
            assert _get_timeout("PGFW_TEST_TIMEOUT", 42) == 42
        assert "Must be integer" in caplog.text

    def test_non_positive_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("PGFW_TEST_TIMEOUT", "0")

        with caplog.at_level(logging.WARNING):
            assert _get_timeout("PGFW_TEST_TIMEOUT", 42) == 42
        assert "Must be positive" in caplog.text


def test_timeouts_are_positive():
    assert Timeouts.OPERATION > 0
    assert Timeouts.AZURE_SDK_CONNECTION > 0
    assert Timeouts.AZURE_SDK_READ > 0
    assert Timeouts.POLL_INTERVAL > 0


def test_log_timeout_event(caplog):
    with caplog.at_level(logging.ERROR, logger="pgfirewall.timeout_config"):
        log_timeout_event("create", 30, level="error")

    assert "Operation 'create' timed out after 30 seconds" in caplog.text
