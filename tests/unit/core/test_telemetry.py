# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for request observation hooks and logging."""

import logging

import pytest
from unittest.mock import MagicMock

from strava_client.core.telemetry import (
    REDACTED_AUTHORIZATION,
    REDACTED_VALUE,
    NoOpTelemetryManager,
    RequestInfo,
    ResponseInfo,
    TelemetryConfig,
    TelemetryManager,
    create_telemetry_manager,
    redact_headers,
    redact_url,
)


class TestTelemetryConfig:
    """Tests for TelemetryConfig dataclass."""

    def test_default_values(self):
        config = TelemetryConfig()
        assert config.on_request is None
        assert config.on_response is None
        assert config.enable_logging is False
        assert config.log_level == "WARNING"
        assert config.logger_name == "strava_client"

    def test_immutability(self):
        config = TelemetryConfig()
        with pytest.raises(AttributeError):
            config.enable_logging = True


class TestTelemetryManagerFactory:
    """Tests for create_telemetry_manager factory."""

    def test_returns_noop_when_config_none(self):
        assert isinstance(create_telemetry_manager(None), NoOpTelemetryManager)

    def test_returns_noop_when_all_disabled(self):
        assert isinstance(create_telemetry_manager(TelemetryConfig()), NoOpTelemetryManager)

    @pytest.mark.parametrize(
        "config",
        [
            TelemetryConfig(enable_logging=True),
            TelemetryConfig(on_request=lambda info: None),
            TelemetryConfig(on_response=lambda info: None),
        ],
    )
    def test_returns_manager_when_enabled(self, config):
        assert isinstance(create_telemetry_manager(config), TelemetryManager)


class TestRedaction:
    def test_authorization_masked_any_case(self):
        headers = {"authorization": "Bearer secret", "Accept": "application/json"}
        assert redact_headers(headers) == {
            "authorization": REDACTED_AUTHORIZATION,
            "Accept": "application/json",
        }

    def test_input_not_modified(self):
        headers = {"Authorization": "Bearer secret"}
        redact_headers(headers)
        assert headers["Authorization"] == "Bearer secret"

    def test_url_credentials_masked(self):
        url = "https://www.strava.com/api/v3/push_subscriptions?client_id=1&client_secret=TOPSECRET"
        assert redact_url(url) == f"https://www.strava.com/api/v3/push_subscriptions?client_id=1&client_secret={REDACTED_VALUE}"

    @pytest.mark.parametrize("name", ["client_secret", "refresh_token", "code", "access_token", "Client_Secret"])
    def test_each_sensitive_param_masked(self, name):
        assert "hunter2" not in redact_url(f"https://x/oauth/token?a=1&{name}=hunter2&b=2")

    def test_url_without_credentials_unchanged(self):
        url = "https://x/athlete/activities?page=2&keys=time%2Cdistance"
        assert redact_url(url) == url
        assert redact_url("https://x/athlete") == "https://x/athlete"


class TestTelemetryManager:
    def test_request_hook_receives_redacted_info(self):
        hook = MagicMock()
        manager = TelemetryManager(TelemetryConfig(on_request=hook))
        manager.request_started("GET", "https://x/athlete", {"Authorization": "Bearer secret"})
        info = hook.call_args[0][0]
        assert isinstance(info, RequestInfo)
        assert info.method == "GET"
        assert info.url == "https://x/athlete"
        assert info.headers["Authorization"] == REDACTED_AUTHORIZATION

    def test_response_hook_receives_status_and_duration(self):
        hook = MagicMock()
        manager = TelemetryManager(TelemetryConfig(on_response=hook))
        manager.request_finished("GET", "https://x/athlete", 200, 12.5)
        hook.assert_called_once_with(ResponseInfo(method="GET", url="https://x/athlete", status=200, duration_ms=12.5))

    def test_hook_exceptions_are_isolated(self, caplog):
        def bad_hook(info):
            raise RuntimeError("hook failure")

        manager = TelemetryManager(TelemetryConfig(on_request=bad_hook, on_response=bad_hook))
        with caplog.at_level(logging.WARNING, logger="strava_client.core.telemetry"):
            manager.request_started("GET", "https://x", {})
            manager.request_finished("GET", "https://x", 500, 1.0)
        assert "on_request hook raised" in caplog.text
        assert "on_response hook raised" in caplog.text

    def test_logging_levels(self, caplog):
        manager = TelemetryManager(TelemetryConfig(enable_logging=True, log_level="DEBUG", logger_name="strava_test"))
        with caplog.at_level(logging.DEBUG, logger="strava_test"):
            manager.request_started("GET", "https://x", {"Authorization": "Bearer secret"})
            manager.request_finished("GET", "https://x", 200, 3.0)
            manager.request_finished("GET", "https://x", 404, 3.0)
            manager.request_finished("GET", "https://x", None, 3.0)
        levels = [(r.levelno, r.getMessage()) for r in caplog.records if r.name == "strava_test"]
        assert levels[0] == (logging.DEBUG, "--> GET https://x")
        assert levels[1][0] == logging.DEBUG
        assert levels[2][0] == logging.WARNING
        assert levels[3][0] == logging.WARNING
        assert "no response" in levels[3][1]
        assert "secret" not in caplog.text

    def test_hooks_and_logs_never_see_url_secret(self, caplog):
        on_request, on_response = MagicMock(), MagicMock()
        manager = TelemetryManager(
            TelemetryConfig(on_request=on_request, on_response=on_response, enable_logging=True, logger_name="strava_test")
        )
        url = "https://x/push_subscriptions?client_id=1&client_secret=TOPSECRET"
        with caplog.at_level(logging.DEBUG, logger="strava_test"):
            manager.request_started("GET", url, {})
            manager.request_finished("GET", url, 403, 2.0)
        assert "TOPSECRET" not in on_request.call_args[0][0].url
        assert "TOPSECRET" not in on_response.call_args[0][0].url
        assert "client_id=1" in on_response.call_args[0][0].url
        assert "TOPSECRET" not in caplog.text


class TestNoOpTelemetryManager:
    def test_methods_do_nothing(self):
        manager = NoOpTelemetryManager()
        manager.request_started("GET", "https://x", {})
        manager.request_finished("GET", "https://x", 200, 1.0)
