"""Tests for environment settings and webhook parameter resolution."""

from __future__ import annotations

import pytest

from remediator.core.config import MissingParameterError, Settings, WebhookParams


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings == Settings()
        assert settings.concurrency == 1
        assert settings.memoize is False

    def test_reads_environment(self):
        settings = Settings.from_env(
            {
                "REMEDIATOR_LOG_LEVEL": "debug",
                "REMEDIATOR_LOG_FORMAT": "JSON",
                "REMEDIATOR_IQ_TIMEOUT": "5.5",
                "REMEDIATOR_CONCURRENCY": "4",
                "REMEDIATOR_MEMOIZE": "yes",
                "REMEDIATOR_IQ_SERVER": "https://iq.example.com",
                "GITHUB_TOKEN": "ghp_x",
            }
        )
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"
        assert settings.iq_timeout == 5.5
        assert settings.concurrency == 4
        assert settings.memoize is True
        assert settings.iq_server == "https://iq.example.com"
        assert settings.iq_auth is None
        assert settings.github_token == "ghp_x"

    def test_concurrency_floor(self):
        assert Settings.from_env({"REMEDIATOR_CONCURRENCY": "0"}).concurrency == 1

    def test_invalid_number(self):
        with pytest.raises(ValueError, match="REMEDIATOR_CONCURRENCY"):
            Settings.from_env({"REMEDIATOR_CONCURRENCY": "many"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("REMEDIATOR_IQ_APP", "my-app")
        assert Settings.from_env().iq_app == "my-app"


class TestWebhookParams:
    QUERY = {
        "iq_server": "https://iq.example.com",
        "iq_auth": "admin:admin123",
        "iq_app": "my-app",
        "token": "ghp_query",
    }

    def test_from_query(self):
        params = WebhookParams.resolve(self.QUERY, Settings())
        assert params == WebhookParams(
            "https://iq.example.com", "admin:admin123", "my-app", "ghp_query"
        )

    def test_query_wins_over_settings(self):
        settings = Settings(iq_app="fallback-app", github_token="ghp_env")
        params = WebhookParams.resolve(self.QUERY, settings)
        assert params.iq_app == "my-app"
        assert params.token == "ghp_query"

    def test_settings_fill_gaps(self):
        settings = Settings(
            iq_server="https://iq.internal", iq_auth="u:p", iq_app="a", github_token="ghp_env"
        )
        params = WebhookParams.resolve({}, settings)
        assert params == WebhookParams("https://iq.internal", "u:p", "a", "ghp_env")

    def test_missing_names_every_parameter(self):
        with pytest.raises(MissingParameterError) as excinfo:
            WebhookParams.resolve({"iq_auth": "u:p"}, Settings())
        assert excinfo.value.names == ["iq_server", "iq_app"]
        assert "iq_server, iq_app" in str(excinfo.value)

    def test_token_optional(self):
        query = {k: v for k, v in self.QUERY.items() if k != "token"}
        assert WebhookParams.resolve(query, Settings()).token is None
