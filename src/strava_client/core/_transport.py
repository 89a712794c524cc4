# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request/response pipeline shared by every client call.

:class:`_Transport` is the single place where authentication, URL and header
construction, timeouts, cancellation, observation hooks, rate-limit
bookkeeping and error classification happen. All higher-level operations
funnel through :meth:`_Transport.execute`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import requests

from ._auth import _TokenManager
from ._error_codes import MESSAGE_TIMED_OUT, MESSAGE_UNREACHABLE
from ._http import ABORT_CALLER, _HttpClient, _RequestAborted
from .cancellation import CancellationToken, RequestCancelledError, raise_if_cancelled
from .errors import (
    ErrorResponse,
    StravaError,
    StravaNetworkError,
    StravaValidationError,
    parse_strava_error,
)
from .rate_limit import RateLimitInfo, parse_rate_limit_headers
from .telemetry import NoOpTelemetryManager, TelemetryManager

ParamValue = Union[str, int, float, bool, None]


class ResponseFormat(str, Enum):
    """How a successful response body is turned into a result."""

    JSON = "json"
    TEXT = "text"
    NONE = "none"


@dataclass(frozen=True)
class RequestConfig:
    """
    Per-call request description. Built fresh for every call and never retained.

    :param method: HTTP method.
    :param path: Path appended to the base URL (``"/athlete"``).
    :param params: Query parameters; ``None`` values are dropped.
    :param json: JSON body.
    :param data: Form body (url-encoded, or multipart fields alongside ``files``).
    :param files: Multipart file parts; suppresses the default JSON content type.
    :param headers: Extra headers, applied after the default content type.
    :param base_url: Overrides the API base URL (used for OAuth endpoints).
    :param skip_auth: Send without an Authorization header and skip token refresh.
    :param skip_rate_limit: Skip rate-limit bookkeeping and the ``on_response`` hook.
    :param timeout: Per-call timeout in seconds.
    :param cancellation: Caller cancellation token.
    :param context: Label prefixed to generic HTTP error messages.
    :param response_format: How to parse a successful response.
    """

    method: str
    path: str
    params: Optional[Mapping[str, ParamValue]] = None
    json: Any = None
    data: Optional[Mapping[str, Any]] = None
    files: Optional[Mapping[str, Any]] = None
    headers: Optional[Mapping[str, str]] = None
    base_url: Optional[str] = None
    skip_auth: bool = False
    skip_rate_limit: bool = False
    timeout: Optional[float] = None
    cancellation: Optional[CancellationToken] = None
    context: Optional[str] = None
    response_format: ResponseFormat = ResponseFormat.JSON


def _encode_param(value: ParamValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(base_url: str, path: str, params: Optional[Mapping[str, ParamValue]] = None) -> str:
    """Join base and path and append the encoded query string, dropping ``None`` values."""
    url = f"{base_url.rstrip('/')}{path}"
    if params:
        query = urlencode([(k, _encode_param(v)) for k, v in params.items() if v is not None])
        if query:
            url += f"?{query}"
    return url


class _Transport:
    """
    Executes :class:`RequestConfig` calls for one client instance.

    :param http: Network dispatcher.
    :param tokens: Credential holder for this client.
    :param api_base_url: Default base URL.
    :param telemetry: Observation hook dispatcher.
    :param auto_refresh: Refresh due tokens before authenticated calls.
    """

    def __init__(
        self,
        http: _HttpClient,
        tokens: _TokenManager,
        *,
        api_base_url: str,
        telemetry: Union[TelemetryManager, NoOpTelemetryManager],
        auto_refresh: bool = True,
    ) -> None:
        self._http = http
        self._tokens = tokens
        self._api_base_url = api_base_url
        self._telemetry = telemetry
        self._auto_refresh = auto_refresh
        self._rate_limit: Optional[RateLimitInfo] = None

    @property
    def rate_limit_info(self) -> Optional[RateLimitInfo]:
        return self._rate_limit

    def _update_rate_limit(self, headers: Mapping[str, str]) -> None:
        info = parse_rate_limit_headers(headers)
        if info is not None:
            self._rate_limit = info

    def _build_headers(self, config: RequestConfig) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if config.files is None:
            headers["Content-Type"] = "application/json"
        if config.headers:
            headers.update(config.headers)
        if not config.skip_auth:
            access_token = self._tokens.access_token()
            if not access_token:
                raise StravaValidationError("No access token available. Please authenticate first.")
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def execute(self, config: RequestConfig) -> Any:
        """
        Run one request through the pipeline.

        :param config: The call description.
        :return: Parsed JSON (``None`` for an empty body), text, or ``None``
            depending on ``config.response_format``.
        :raises RequestCancelledError: If the caller's token was cancelled.
        :raises StravaNetworkError: On timeout or when the host is unreachable.
        :raises StravaError: The classified error for any non-2xx response.
        """
        raise_if_cancelled(config.cancellation)

        if not config.skip_auth and self._auto_refresh and self._tokens.has_tokens():
            self._tokens.ensure_fresh()

        method = config.method.upper()
        url = build_url(config.base_url or self._api_base_url, config.path, config.params)
        headers = self._build_headers(config)
        timeout = config.timeout if config.timeout is not None else self._http.default_timeout

        self._telemetry.request_started(method, url, headers)

        status: Optional[int] = None
        start = time.perf_counter()
        try:
            response = self._http._request(
                method,
                url,
                headers=headers,
                json=config.json,
                data=config.data,
                files=config.files,
                timeout=timeout,
                cancellation=config.cancellation,
            )
            status = response.status_code
        except _RequestAborted as exc:
            if exc.reason == ABORT_CALLER:
                raise RequestCancelledError() from None
            raise StravaNetworkError(MESSAGE_TIMED_OUT) from exc
        except requests.exceptions.Timeout as exc:
            raise StravaNetworkError(MESSAGE_TIMED_OUT) from exc
        except requests.exceptions.ConnectionError as exc:
            raise StravaNetworkError(MESSAGE_UNREACHABLE) from exc
        except StravaError:
            raise
        except Exception as exc:
            raise parse_strava_error(exc) from exc
        finally:
            if not config.skip_rate_limit:
                duration_ms = (time.perf_counter() - start) * 1000
                self._telemetry.request_finished(method, url, status, duration_ms)

        if not 200 <= response.status_code < 300:
            try:
                data = response.json()
            except ValueError:
                data = {}
            if not config.skip_rate_limit:
                self._update_rate_limit(response.headers)
            raise parse_strava_error(
                ErrorResponse(
                    status=response.status_code,
                    data=data,
                    headers=response.headers,
                    context=config.context,
                )
            )

        if not config.skip_rate_limit:
            self._update_rate_limit(response.headers)
        return self._parse(response, config.response_format)

    @staticmethod
    def _parse(response: requests.Response, response_format: ResponseFormat) -> Any:
        if response_format is ResponseFormat.NONE:
            return None
        if response_format is ResponseFormat.TEXT:
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise parse_strava_error(exc) from exc
