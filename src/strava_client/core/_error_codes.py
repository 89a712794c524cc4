# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# Error kind codes
STRAVA_ERROR = "STRAVA_ERROR"
STRAVA_UNKNOWN_ERROR = "STRAVA_UNKNOWN_ERROR"
STRAVA_HTTP_ERROR = "STRAVA_HTTP_ERROR"
STRAVA_AUTH_ERROR = "STRAVA_AUTH_ERROR"
STRAVA_AUTHORIZATION_ERROR = "STRAVA_AUTHORIZATION_ERROR"
STRAVA_NOT_FOUND = "STRAVA_NOT_FOUND"
STRAVA_RATE_LIMIT = "STRAVA_RATE_LIMIT"
STRAVA_TOKEN_REFRESH_ERROR = "STRAVA_TOKEN_REFRESH_ERROR"
STRAVA_VALIDATION_ERROR = "STRAVA_VALIDATION_ERROR"
STRAVA_NETWORK_ERROR = "STRAVA_NETWORK_ERROR"
STRAVA_API_ERROR = "STRAVA_API_ERROR"

ALL_ERROR_CODES = {
    STRAVA_ERROR,
    STRAVA_UNKNOWN_ERROR,
    STRAVA_HTTP_ERROR,
    STRAVA_AUTH_ERROR,
    STRAVA_AUTHORIZATION_ERROR,
    STRAVA_NOT_FOUND,
    STRAVA_RATE_LIMIT,
    STRAVA_TOKEN_REFRESH_ERROR,
    STRAVA_VALIDATION_ERROR,
    STRAVA_NETWORK_ERROR,
    STRAVA_API_ERROR,
}

# Response header names (matched case-insensitively)
HEADER_RETRY_AFTER = "retry-after"
HEADER_RATE_LIMIT_LIMIT = "x-ratelimit-limit"
HEADER_RATE_LIMIT_USAGE = "x-ratelimit-usage"

# Network failure messages
MESSAGE_TIMED_OUT = "Request timed out"
MESSAGE_UNREACHABLE = "Network error - unable to reach Strava"
