# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Strava client tests.

This module provides common test fixtures, fake responses, and configuration
that can be used across all test modules.
"""

import time

import pytest

from strava_client.client import StravaClient
from strava_client.core.config import StravaConfig
from strava_client.models.auth import StravaTokens


@pytest.fixture
def fresh_tokens():
    """Tokens that expire in six hours."""
    return StravaTokens(
        access_token="test_access_token",
        refresh_token="test_refresh_token",
        expires_at=int(time.time()) + 6 * 3600,
    )


@pytest.fixture
def expiring_tokens():
    """Tokens inside the default refresh buffer."""
    return StravaTokens(
        access_token="old_access_token",
        refresh_token="old_refresh_token",
        expires_at=int(time.time()) + 60,
    )


@pytest.fixture
def test_config():
    """Test configuration with a short timeout."""
    return StravaConfig(timeout=5.0, max_workers=4)


@pytest.fixture
def client(test_config, fresh_tokens):
    """Authenticated client; closed after the test."""
    c = StravaClient("12345", "test_secret", redirect_uri="http://localhost/callback", config=test_config)
    c.set_tokens(fresh_tokens)
    yield c
    c.close()
