# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exceptions for the Strava client and the classifier that maps
transport-level failures onto them.

Every failure surfaced by the client is a :class:`StravaError` subclass with a
stable ``code`` (see :mod:`strava_client.core._error_codes`). Callers are
expected to branch on the exception class or ``code``, never on message text.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ._error_codes import (
    HEADER_RATE_LIMIT_LIMIT,
    HEADER_RATE_LIMIT_USAGE,
    HEADER_RETRY_AFTER,
    STRAVA_API_ERROR,
    STRAVA_AUTH_ERROR,
    STRAVA_AUTHORIZATION_ERROR,
    STRAVA_ERROR,
    STRAVA_HTTP_ERROR,
    STRAVA_NETWORK_ERROR,
    STRAVA_NOT_FOUND,
    STRAVA_RATE_LIMIT,
    STRAVA_TOKEN_REFRESH_ERROR,
    STRAVA_UNKNOWN_ERROR,
    STRAVA_VALIDATION_ERROR,
)


class StravaError(Exception):
    """
    Base structured error for the Strava client.

    :param message: Human-readable error message.
    :type message: :class:`str`
    :param code: Stable machine-readable error code.
    :type code: :class:`str`
    :param status_code: HTTP status code, when the error originated from a response.
    :type status_code: :class:`int` | None
    :param details: Additional kind-specific details.
    :type details: :class:`dict` | None
    :param context: Optional label describing the operation that failed.
    :type context: :class:`str` | None
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = STRAVA_ERROR,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.context = context
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": self.details,
            "context": self.context,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, status_code={self.status_code!r}, message={self.message!r})"


class StravaAuthenticationError(StravaError):
    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, code=STRAVA_AUTH_ERROR, status_code=401)


class StravaAuthorizationError(StravaError):
    def __init__(self, message: str = "Access denied - insufficient permissions") -> None:
        super().__init__(message, code=STRAVA_AUTHORIZATION_ERROR, status_code=403)


class StravaNotFoundError(StravaError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code=STRAVA_NOT_FOUND, status_code=404)


class StravaRateLimitError(StravaError):
    """
    Raised on HTTP 429. Carries the metadata a caller needs to back off.

    :param retry_after: Seconds to wait, from the ``Retry-After`` header.
    :type retry_after: :class:`int` | None
    :param limit: Raw ``X-RateLimit-Limit`` header value (``"short,long"``).
    :type limit: :class:`str` | None
    :param usage: Raw ``X-RateLimit-Usage`` header value (``"short,long"``).
    :type usage: :class:`str` | None
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        limit: Optional[str] = None,
        usage: Optional[str] = None,
    ) -> None:
        d: Dict[str, Any] = {}
        if retry_after is not None:
            d["retry_after"] = retry_after
        if limit is not None:
            d["limit"] = limit
        if usage is not None:
            d["usage"] = usage
        super().__init__(message, code=STRAVA_RATE_LIMIT, status_code=429, details=d)
        self.retry_after = retry_after
        self.limit = limit
        self.usage = usage


class StravaTokenRefreshError(StravaError):
    def __init__(self, message: str = "Failed to refresh access token") -> None:
        super().__init__(message, code=STRAVA_TOKEN_REFRESH_ERROR, status_code=401)


class StravaValidationError(StravaError):
    """Raised on HTTP 400 and for client-side validation failures."""

    def __init__(self, message: str = "Invalid request parameters") -> None:
        super().__init__(message, code=STRAVA_VALIDATION_ERROR, status_code=400)


class StravaNetworkError(StravaError):
    """Transport failure with no HTTP status: timeout or unreachable host."""

    def __init__(self, message: str = "Network request failed") -> None:
        super().__init__(message, code=STRAVA_NETWORK_ERROR)


class StravaApiError(StravaError):
    """Server-side failure (HTTP 5xx), or a failure reported inside a successful response body."""

    def __init__(
        self,
        message: str = "Strava API error",
        status_code: Optional[int] = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=STRAVA_API_ERROR, status_code=status_code, details=details)


@dataclass
class ErrorResponse:
    """
    Non-success HTTP response handed to :func:`parse_strava_error`.

    :param status: HTTP status code.
    :param data: Parsed JSON body (``{}`` when the body was not JSON).
    :param headers: Response headers.
    :param context: Optional label of the failing operation.
    """

    status: int
    data: Any = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    context: Optional[str] = None


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return value
    return None


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except (ValueError, TypeError, AttributeError):
        return None


def _message_from(response: ErrorResponse) -> str:
    data = response.data
    if isinstance(data, dict):
        message = data.get("message")
        if message:
            return str(message)
    return f"Request failed with status {response.status}"


def parse_strava_error(error: Any) -> StravaError:
    """
    Classify a failure into exactly one :class:`StravaError`.

    Precedence for HTTP responses: 429, 401, 403, 404, 400, >=500, then a
    generic HTTP error that preserves the status and prefixes the message with
    the context label when one is supplied.

    :param error: An :class:`ErrorResponse`, an existing :class:`StravaError`,
        any exception, or any other value.
    :return: The classified error. Existing ``StravaError`` instances are
        returned unchanged.
    :rtype: StravaError
    """
    if isinstance(error, StravaError):
        return error

    if isinstance(error, ErrorResponse):
        status = error.status
        message = _message_from(error)

        if status == 429:
            return StravaRateLimitError(
                message,
                retry_after=_parse_retry_after(_header(error.headers, HEADER_RETRY_AFTER)),
                limit=_header(error.headers, HEADER_RATE_LIMIT_LIMIT),
                usage=_header(error.headers, HEADER_RATE_LIMIT_USAGE),
            )
        if status == 401:
            return StravaAuthenticationError(message)
        if status == 403:
            return StravaAuthorizationError(message)
        if status == 404:
            return StravaNotFoundError(message)
        if status == 400:
            return StravaValidationError(message)
        if status >= 500:
            return StravaApiError(message, status)

        return StravaError(
            f"{error.context}: {message}" if error.context else message,
            code=STRAVA_HTTP_ERROR,
            status_code=status,
            context=error.context,
        )

    if isinstance(error, BaseException):
        return StravaError(str(error), code=STRAVA_ERROR)

    return StravaError(str(error), code=STRAVA_UNKNOWN_ERROR)


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
]
