# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request observation for the Strava client.

Provides the ``on_request`` / ``on_response`` hook contract and opt-in request
logging. Hooks receive headers with the Authorization value masked and URLs
with credential query parameters masked; the real credentials are never
handed to observation code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Union
from urllib.parse import unquote_plus, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

REDACTED_AUTHORIZATION = "Bearer [REDACTED]"
REDACTED_VALUE = "[REDACTED]"

# Query parameters whose values never reach hooks or logs
SENSITIVE_QUERY_PARAMS = frozenset({"client_secret", "refresh_token", "code", "access_token"})


# ============================================================================
# Configuration
# ============================================================================


@dataclass(frozen=True)
class TelemetryConfig:
    """Configuration for request observation.

    Observation is opt-in. Hooks are plain callables invoked synchronously on
    the calling thread.

    Example:
        Print every request::

            config = StravaConfig(
                telemetry=TelemetryConfig(
                    on_request=lambda info: print(info.method, info.url),
                    on_response=lambda info: print(info.status, f"{info.duration_ms:.0f}ms"),
                )
            )

        Log through the standard library::

            config = StravaConfig(
                telemetry=TelemetryConfig(enable_logging=True, log_level="DEBUG")
            )
    """

    on_request: Optional[Callable[["RequestInfo"], None]] = None
    on_response: Optional[Callable[["ResponseInfo"], None]] = None

    # Logging configuration
    enable_logging: bool = False
    log_level: str = "WARNING"
    logger_name: str = "strava_client"


# ============================================================================
# Context Objects
# ============================================================================


@dataclass(frozen=True)
class RequestInfo:
    """Passed to ``on_request`` before each HTTP request is sent."""

    method: str
    # Credential query parameter values replaced by REDACTED_VALUE
    url: str
    # Authorization value replaced by REDACTED_AUTHORIZATION
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseInfo:
    """Passed to ``on_response`` after each HTTP request completes or fails."""

    method: str
    url: str
    status: Optional[int]
    duration_ms: float


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``headers`` with any Authorization value masked."""
    return {
        k: (REDACTED_AUTHORIZATION if k.lower() == "authorization" else v)
        for k, v in headers.items()
    }


def redact_url(url: str) -> str:
    """Return ``url`` with the values of credential query parameters masked.

    Only the values of :data:`SENSITIVE_QUERY_PARAMS` change; every other
    part of the URL is kept byte for byte.
    """
    parts = urlsplit(url)
    if not parts.query:
        return url
    pairs = []
    for pair in parts.query.split("&"):
        name = pair.partition("=")[0]
        if unquote_plus(name).lower() in SENSITIVE_QUERY_PARAMS:
            pair = f"{name}={REDACTED_VALUE}"
        pairs.append(pair)
    return urlunsplit(parts._replace(query="&".join(pairs)))


# ============================================================================
# Telemetry Manager
# ============================================================================


class TelemetryManager:
    """Dispatches request observations to hooks and the configured logger.

    This class is internal and not part of the public API.
    """

    def __init__(self, config: Optional[TelemetryConfig] = None) -> None:
        self._config = config or TelemetryConfig()
        self._logger: Optional[logging.Logger] = None

        if self._config.enable_logging:
            self._logger = logging.getLogger(self._config.logger_name)
            self._logger.setLevel(getattr(logging, self._config.log_level.upper()))

    def request_started(self, method: str, url: str, headers: Mapping[str, str]) -> None:
        url = redact_url(url)
        info = RequestInfo(method=method, url=url, headers=redact_headers(headers))
        if self._logger:
            self._logger.debug(f"--> {method} {url}")
        hook = self._config.on_request
        if hook is not None:
            try:
                hook(info)
            except Exception:
                # Hooks should not break requests
                logger.warning("on_request hook raised", exc_info=True)

    def request_finished(
        self, method: str, url: str, status: Optional[int], duration_ms: float
    ) -> None:
        url = redact_url(url)
        info = ResponseInfo(method=method, url=url, status=status, duration_ms=duration_ms)
        if self._logger:
            level = logging.WARNING if status is None or status >= 400 else logging.DEBUG
            self._logger.log(
                level,
                f"<-- {method} {url} {status if status is not None else 'no response'} {duration_ms:.1f}ms",
            )
        hook = self._config.on_response
        if hook is not None:
            try:
                hook(info)
            except Exception:
                logger.warning("on_response hook raised", exc_info=True)


# ============================================================================
# No-op Manager for when observation is disabled
# ============================================================================


class NoOpTelemetryManager:
    """No-op telemetry manager when no hook or logging is configured."""

    def request_started(self, method: str, url: str, headers: Mapping[str, str]) -> None:
        pass

    def request_finished(
        self, method: str, url: str, status: Optional[int], duration_ms: float
    ) -> None:
        pass


def create_telemetry_manager(
    config: Optional[TelemetryConfig],
) -> Union[TelemetryManager, NoOpTelemetryManager]:
    """Factory to create appropriate telemetry manager."""
    if config is None:
        return NoOpTelemetryManager()

    has_any_enabled = (
        config.enable_logging
        or config.on_request is not None
        or config.on_response is not None
    )

    if not has_any_enabled:
        return NoOpTelemetryManager()

    return TelemetryManager(config)


__all__ = [
    "TelemetryConfig",
    "TelemetryManager",
    "NoOpTelemetryManager",
    "RequestInfo",
    "ResponseInfo",
    "REDACTED_AUTHORIZATION",
    "REDACTED_VALUE",
    "SENSITIVE_QUERY_PARAMS",
    "redact_headers",
    "redact_url",
    "create_telemetry_manager",
]
