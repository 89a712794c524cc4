# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Strava client.

This module contains the foundational components including configuration,
error handling, cancellation, rate-limit tracking, request observation and
pagination.
"""

from .errors import (
    StravaError,
    StravaAuthenticationError,
    StravaAuthorizationError,
    StravaNotFoundError,
    StravaRateLimitError,
    StravaTokenRefreshError,
    StravaValidationError,
    StravaNetworkError,
    StravaApiError,
    ErrorResponse,
    parse_strava_error,
)
from .cancellation import CancellationToken, RequestCancelledError
from .rate_limit import RateLimitInfo, RateLimitWindow, parse_rate_limit_headers
from .telemetry import TelemetryConfig, RequestInfo, ResponseInfo
from .config import StravaConfig
from .pagination import iterate_pages, collect_all

__all__ = [
    "StravaError",
    "StravaAuthenticationError",
    "StravaAuthorizationError",
    "StravaNotFoundError",
    "StravaRateLimitError",
    "StravaTokenRefreshError",
    "StravaValidationError",
    "StravaNetworkError",
    "StravaApiError",
    "ErrorResponse",
    "parse_strava_error",
    "CancellationToken",
    "RequestCancelledError",
    "RateLimitInfo",
    "RateLimitWindow",
    "parse_rate_limit_headers",
    "TelemetryConfig",
    "RequestInfo",
    "ResponseInfo",
    "StravaConfig",
    "iterate_pages",
    "collect_all",
]
