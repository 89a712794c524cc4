# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import time
import unittest
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from strava_client.client import ClientInfo, StravaClient
from strava_client.core._transport import RequestConfig, ResponseFormat
from strava_client.core.config import StravaConfig
from strava_client.core.errors import (
    StravaAuthenticationError,
    StravaTokenRefreshError,
    StravaValidationError,
)
from strava_client.core.rate_limit import RateLimitWindow
from strava_client.core.telemetry import TelemetryConfig
from strava_client.models.auth import StravaTokens
from tests.fixtures.test_data import (
    RATE_LIMIT_HEADERS,
    SAMPLE_ATHLETE,
    SAMPLE_SUBSCRIPTION,
    SAMPLE_TOKEN_RESPONSE,
    make_response,
)


class TestStravaClientConstruction(unittest.TestCase):
    def test_requires_client_id(self):
        with self.assertRaises(ValueError):
            StravaClient("", "secret")

    def test_requires_client_secret(self):
        with self.assertRaises(ValueError):
            StravaClient("12345", None)

    def test_defaults(self):
        client = StravaClient(12345, "secret")
        self.assertEqual(client.client_id, "12345")
        self.assertEqual(client.config, StravaConfig.defaults())
        self.assertEqual(client._http.default_timeout, 30.0)
        self.assertEqual(client._tokens.refresh_buffer, 600)


class TestAuthorizationUrl(unittest.TestCase):
    def test_builds_url(self):
        client = StravaClient("12345", "secret", redirect_uri="http://localhost/callback")
        url = client.get_authorization_url(state="xyz")
        parsed = urlparse(url)
        self.assertEqual(f"{parsed.scheme}://{parsed.netloc}{parsed.path}", "https://www.strava.com/oauth/authorize")
        self.assertEqual(
            parse_qs(parsed.query),
            {
                "client_id": ["12345"],
                "redirect_uri": ["http://localhost/callback"],
                "response_type": ["code"],
                "approval_prompt": ["auto"],
                "scope": ["activity:read_all"],
                "state": ["xyz"],
            },
        )

    def test_custom_scope_and_prompt(self):
        client = StravaClient("12345", "secret", redirect_uri="http://localhost/callback")
        query = parse_qs(urlparse(client.get_authorization_url("read,activity:write", approval_prompt="force")).query)
        self.assertEqual(query["scope"], ["read,activity:write"])
        self.assertEqual(query["approval_prompt"], ["force"])
        self.assertNotIn("state", query)

    def test_requires_redirect_uri(self):
        with self.assertRaises(StravaValidationError):
            StravaClient("12345", "secret").get_authorization_url()

    def test_rejects_bad_prompt(self):
        client = StravaClient("12345", "secret", redirect_uri="http://localhost/callback")
        with self.assertRaises(StravaValidationError):
            client.get_authorization_url(approval_prompt="always")


class TestOAuthCalls:
    @patch("requests.request")
    def test_exchange_authorization_code(self, mock_request):
        mock_request.return_value = make_response(200, dict(SAMPLE_TOKEN_RESPONSE, athlete=SAMPLE_ATHLETE), headers=RATE_LIMIT_HEADERS)
        client = StravaClient("12345", "secret")
        try:
            response = client.exchange_authorization_code("auth_code")
        finally:
            client.close()

        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://www.strava.com/oauth/token")
        assert kwargs["json"] == {
            "code": "auth_code",
            "grant_type": "authorization_code",
            "client_id": "12345",
            "client_secret": "secret",
        }
        assert "Authorization" not in kwargs["headers"]
        assert response.athlete["id"] == SAMPLE_ATHLETE["id"]
        assert client.get_tokens() == StravaTokens("new_access_token", "new_refresh_token", 4102444800)
        assert client.get_rate_limit_info() is None

    @patch("requests.request")
    def test_refresh_access_token(self, mock_request):
        on_refresh = MagicMock()
        mock_request.return_value = make_response(200, SAMPLE_TOKEN_RESPONSE)
        client = StravaClient("12345", "secret", config=StravaConfig(on_token_refresh=on_refresh))
        client.set_tokens(StravaTokens("a", "stored_refresh", int(time.time()) + 99999))
        try:
            client.refresh_access_token()
        finally:
            client.close()

        assert mock_request.call_args.kwargs["json"]["grant_type"] == "refresh_token"
        assert mock_request.call_args.kwargs["json"]["refresh_token"] == "stored_refresh"
        on_refresh.assert_called_once_with(StravaTokens("new_access_token", "new_refresh_token", 4102444800))

    def test_refresh_without_token(self):
        with pytest.raises(StravaTokenRefreshError):
            StravaClient("12345", "secret").refresh_access_token()

    @patch("requests.request")
    def test_failed_refresh_keeps_tokens(self, mock_request):
        mock_request.return_value = make_response(401, {"message": "Bad Request", "errors": []})
        client = StravaClient("12345", "secret")
        tokens = StravaTokens("a", "r", int(time.time()) - 5)
        client.set_tokens(tokens)
        try:
            with pytest.raises(StravaAuthenticationError):
                client.athletes.get()
        finally:
            client.close()
        assert client.get_tokens() == tokens
        assert mock_request.call_count == 1

    @patch("requests.request")
    def test_deauthorize_clears_tokens(self, mock_request, client):
        mock_request.return_value = make_response(200, {"access_token": "test_access_token"}, headers=RATE_LIMIT_HEADERS)
        client.deauthorize()

        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://www.strava.com/oauth/deauthorize")
        assert kwargs["headers"]["Authorization"] == "Bearer test_access_token"
        assert client.get_tokens() is None
        assert client.get_rate_limit_info() is None


class TestAutoRefresh:
    @patch("requests.request")
    def test_expiring_token_refreshed_once_before_call(self, mock_request, expiring_tokens):
        mock_request.side_effect = [
            make_response(200, SAMPLE_TOKEN_RESPONSE),
            make_response(200, SAMPLE_ATHLETE, headers=RATE_LIMIT_HEADERS),
        ]
        client = StravaClient("12345", "secret")
        client.set_tokens(expiring_tokens)
        try:
            athlete = client.athletes.get()
        finally:
            client.close()

        assert athlete == SAMPLE_ATHLETE
        urls = [c[0][1] for c in mock_request.call_args_list]
        assert urls == ["https://www.strava.com/oauth/token", "https://www.strava.com/api/v3/athlete"]
        assert mock_request.call_args.kwargs["headers"]["Authorization"] == "Bearer new_access_token"


class TestClientStatus:
    @patch("requests.request")
    def test_rate_limit_info_after_call(self, mock_request, client):
        mock_request.return_value = make_response(200, SAMPLE_ATHLETE, headers=RATE_LIMIT_HEADERS)
        assert client.get_rate_limit_info() is None
        client.athletes.get()
        assert client.get_rate_limit_info().short_term == RateLimitWindow(usage=10, limit=100)

    @patch("requests.request")
    def test_test_connection(self, mock_request, client):
        mock_request.return_value = make_response(200, SAMPLE_ATHLETE)
        assert client.test_connection() is True
        mock_request.return_value = make_response(401, {"message": "Authorization Error"})
        assert client.test_connection() is False
        mock_request.side_effect = requests.exceptions.ConnectionError("down")
        assert client.test_connection() is False

    def test_test_connection_without_tokens(self):
        assert StravaClient("12345", "secret").test_connection() is False

    def test_get_client_info(self, client, fresh_tokens):
        info = client.get_client_info()
        assert isinstance(info, ClientInfo)
        assert info.has_tokens is True
        assert info.is_authenticated is True
        assert info.token_expires_at == fresh_tokens.expires_at_datetime
        assert info.rate_limit_info is None

    def test_get_client_info_without_tokens(self):
        info = StravaClient("12345", "secret").get_client_info()
        assert info == ClientInfo(False, False, None, None)

    def test_has_valid_tokens(self, client):
        assert client.has_valid_tokens() is True
        client.clear_tokens()
        assert client.has_valid_tokens() is False


class TestClientPagination:
    def test_paginate_and_collect_all(self):
        client = StravaClient("12345", "secret")
        pages = {1: [1, 2], 2: [3]}
        fetch = MagicMock(side_effect=lambda page, per_page: pages.get(page, []))
        assert list(client.paginate(fetch, 2)) == [1, 2, 3]
        assert client.collect_all(fetch, 2) == [1, 2, 3]

    def test_paginate_validates_per_page(self):
        with pytest.raises(StravaValidationError):
            StravaClient("12345", "secret").paginate(MagicMock(), 0)


class TestExecuteDelegation(unittest.TestCase):
    def test_execute_goes_through_transport(self):
        client = StravaClient("12345", "secret")
        client._transport = MagicMock()
        config = RequestConfig("GET", "/athlete", response_format=ResponseFormat.JSON)
        client._execute(config)
        client._transport.execute.assert_called_once_with(config)


class TestCredentialMasking:
    @patch("requests.request")
    def test_app_secret_in_query_never_reaches_hooks(self, mock_request):
        on_request, on_response = MagicMock(), MagicMock()
        mock_request.side_effect = [make_response(200, [SAMPLE_SUBSCRIPTION]), make_response(204)]
        config = StravaConfig(telemetry=TelemetryConfig(on_request=on_request, on_response=on_response))
        client = StravaClient("1", "TOPSECRET", config=config)
        try:
            client.webhooks.get_subscription()
            client.webhooks.delete_subscription(5)
        finally:
            client.close()

        # the real secret still goes on the wire
        assert "client_secret=TOPSECRET" in mock_request.call_args_list[0][0][1]
        observed = [c[0][0] for c in on_request.call_args_list + on_response.call_args_list]
        assert len(observed) == 4
        for info in observed:
            assert "TOPSECRET" not in repr(info)
            assert "client_secret=[REDACTED]" in info.url
