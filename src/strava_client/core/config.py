# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .telemetry import TelemetryConfig

STRAVA_API_BASE_URL = "https://www.strava.com/api/v3"
STRAVA_OAUTH_BASE_URL = "https://www.strava.com/oauth"
DEFAULT_REFRESH_BUFFER = 600  # 10 minutes
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class StravaConfig:
    """
    Configuration settings for Strava client operations.

    :param auto_refresh: Refresh the access token automatically before authenticated calls (default: True).
    :type auto_refresh: bool
    :param refresh_buffer: Seconds before expiry at which a token is considered due for refresh (default: 600).
    :type refresh_buffer: int
    :param timeout: Default request timeout in seconds (default: 30.0). Individual calls may override it.
    :type timeout: float
    :param api_base_url: Base URL for REST endpoints.
    :type api_base_url: str
    :param oauth_base_url: Base URL for OAuth endpoints (authorize, token, deauthorize).
    :type oauth_base_url: str
    :param max_workers: Number of dispatch threads used to run HTTP calls (default: 8).
    :type max_workers: int
    :param on_token_refresh: Called with a copy of the new tokens after every successful refresh.
        Exceptions raised by this callback propagate to the caller that triggered the refresh.
    :type on_token_refresh: callable or None
    :param telemetry: Request observation hooks and logging settings.
    :type telemetry: ~strava_client.core.telemetry.TelemetryConfig
    """

    auto_refresh: bool = True
    refresh_buffer: int = DEFAULT_REFRESH_BUFFER
    timeout: float = DEFAULT_TIMEOUT

    api_base_url: str = STRAVA_API_BASE_URL
    oauth_base_url: str = STRAVA_OAUTH_BASE_URL
    max_workers: int = DEFAULT_MAX_WORKERS

    on_token_refresh: Optional[Callable[..., None]] = None
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)

    @classmethod
    def defaults(cls) -> "StravaConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~strava_client.core.config.StravaConfig
        """
        return cls()
