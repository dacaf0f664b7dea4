"""Unit tests for settings loading."""

from __future__ import annotations

import logging

import pytest

from monasca_smoke.config import DEFAULT_TIMEOUT_SECONDS, Settings


class TestTimeoutSetting:
    """TIMEOUT parsing falls back to 5 seconds instead of failing."""

    @pytest.fixture(autouse=True)
    def _no_timeout_env(self, monkeypatch):
        monkeypatch.delenv("TIMEOUT", raising=False)

    def test_default_when_unset(self):
        settings = Settings(_env_file=None)

        assert settings.timeout == DEFAULT_TIMEOUT_SECONDS == 5

    def test_reads_integer_from_environment(self, monkeypatch):
        monkeypatch.setenv("TIMEOUT", "12")

        assert Settings(_env_file=None).timeout == 12

    def test_not_a_number_logs_warning_and_defaults(self, monkeypatch, caplog):
        """
        Given TIMEOUT=notanumber,
        When settings are loaded,
        Then the timeout is 5 seconds and a warning is logged.
        """
        monkeypatch.setenv("TIMEOUT", "notanumber")

        with caplog.at_level(logging.WARNING, logger="monasca_smoke.config"):
            settings = Settings(_env_file=None)

        assert settings.timeout == 5
        assert any("TIMEOUT" in record.getMessage() for record in caplog.records)

    @pytest.mark.parametrize("value", ["0", "-3"])
    def test_non_positive_defaults(self, monkeypatch, caplog, value):
        monkeypatch.setenv("TIMEOUT", value)

        with caplog.at_level(logging.WARNING, logger="monasca_smoke.config"):
            settings = Settings(_env_file=None)

        assert settings.timeout == 5
        assert caplog.records

    def test_empty_string_defaults_silently(self, monkeypatch, caplog):
        monkeypatch.setenv("TIMEOUT", "")

        with caplog.at_level(logging.WARNING, logger="monasca_smoke.config"):
            settings = Settings(_env_file=None)

        assert settings.timeout == 5
        assert not caplog.records


class TestWebhookSettings:
    def test_webhook_address_defaults_to_loopback(self, monkeypatch):
        monkeypatch.delenv("WEBHOOK_IP", raising=False)
        monkeypatch.delenv("WEBHOOK_PORT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.webhook_address == "http://127.0.0.1:8080"

    def test_webhook_ip_from_environment(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_IP", "10.0.0.7")
        monkeypatch.delenv("WEBHOOK_PORT", raising=False)

        assert Settings(_env_file=None).webhook_address == "http://10.0.0.7:8080"

    def test_poll_defaults_cover_five_minutes(self, monkeypatch):
        monkeypatch.delenv("WEBHOOK_POLL_ITERATIONS", raising=False)
        monkeypatch.delenv("WEBHOOK_POLL_INTERVAL_SECONDS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.webhook_poll_iterations * settings.webhook_poll_interval_seconds == 300
