# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Python client for the Strava REST API v3.

Example::

    from strava_client import StravaClient, StravaTokens

    with StravaClient(client_id, client_secret) as client:
        client.set_tokens(StravaTokens(access_token, refresh_token, expires_at))
        print(client.athletes.get()["firstname"])
"""

from .__version__ import __version__
from .client import ClientInfo, StravaClient
from .core.cancellation import CancellationToken, RequestCancelledError
from .core.config import StravaConfig
from .core.errors import (
    StravaApiError,
    StravaAuthenticationError,
    StravaAuthorizationError,
    StravaError,
    StravaNetworkError,
    StravaNotFoundError,
    StravaRateLimitError,
    StravaTokenRefreshError,
    StravaValidationError,
    parse_strava_error,
)
from .core.rate_limit import RateLimitInfo, RateLimitWindow
from .core.telemetry import RequestInfo, ResponseInfo, TelemetryConfig
from .models.auth import StravaTokens, TokenResponse
from .models.webhook import WebhookEvent, WebhookSubscription
from .webhooks import parse_webhook_event, validate_webhook_verification

__all__ = [
    "__version__",
    "StravaClient",
    "ClientInfo",
    "StravaConfig",
    "TelemetryConfig",
    "RequestInfo",
    "ResponseInfo",
    "CancellationToken",
    "RequestCancelledError",
    "StravaError",
    "StravaAuthenticationError",
    "StravaAuthorizationError",
    "StravaNotFoundError",
    "StravaRateLimitError",
    "StravaTokenRefreshError",
    "StravaValidationError",
    "StravaNetworkError",
    "StravaApiError",
    "parse_strava_error",
    "RateLimitInfo",
    "RateLimitWindow",
    "StravaTokens",
    "TokenResponse",
    "WebhookEvent",
    "WebhookSubscription",
    "parse_webhook_event",
    "validate_webhook_verification",
]
