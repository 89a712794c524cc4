# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
OAuth token lifecycle for a single client instance.

:class:`_TokenManager` owns the credential state, decides when a refresh is
due, and guarantees that at most one refresh exchange is in flight no matter
how many threads need a fresh token at the same time.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import replace
from typing import Callable, Optional

from ..models.auth import StravaTokens, TokenResponse
from .errors import StravaTokenRefreshError

logger = logging.getLogger(__name__)


class _TokenManager:
    """
    Credential holder with single-flight refresh.

    :param exchange: Performs one refresh-token exchange against the OAuth endpoint.
    :type exchange: callable taking the refresh token and returning a
        :class:`~strava_client.models.auth.TokenResponse`
    :param refresh_buffer: Seconds before expiry at which a refresh becomes due.
    :type refresh_buffer: int
    :param on_token_refresh: Called with a copy of the new tokens after each
        successful refresh. Its exceptions propagate.
    :type on_token_refresh: callable or None
    :param clock: Returns the current time as epoch seconds.
    :type clock: callable
    """

    def __init__(
        self,
        exchange: Callable[[str], TokenResponse],
        *,
        refresh_buffer: int = 600,
        on_token_refresh: Optional[Callable[[StravaTokens], None]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._exchange = exchange
        self.refresh_buffer = refresh_buffer
        self._on_token_refresh = on_token_refresh
        self._clock = clock

        self._tokens: Optional[StravaTokens] = None
        self._lock = threading.Lock()
        # Present only while a refresh is outstanding
        self._refresh_future: Optional[Future] = None
        self._refresh_owner: Optional[int] = None

    def _now(self) -> int:
        return int(self._clock())

    # --------------------------- credential state ---------------------------

    def set_tokens(self, tokens: StravaTokens) -> None:
        self._tokens = replace(tokens)

    def get_tokens(self) -> Optional[StravaTokens]:
        tokens = self._tokens
        return replace(tokens) if tokens is not None else None

    def clear_tokens(self) -> None:
        self._tokens = None

    def has_tokens(self) -> bool:
        return self._tokens is not None

    def has_valid_tokens(self) -> bool:
        tokens = self._tokens
        if tokens is None:
            return False
        return tokens.expires_at > self._now()

    def access_token(self) -> Optional[str]:
        tokens = self._tokens
        return tokens.access_token if tokens is not None else None

    # ------------------------------- refresh --------------------------------

    def _is_due(self) -> bool:
        tokens = self._tokens
        if tokens is None:
            return False
        return tokens.expires_at < self._now() + self.refresh_buffer

    def ensure_fresh(self) -> None:
        """
        Refresh the access token if it expires within the refresh buffer.

        Callers arriving while another refresh is running wait for that refresh
        and observe its outcome (the same new tokens or the same exception)
        instead of starting a second exchange. The in-flight marker is removed
        before any failure propagates. A call made from ``on_token_refresh`` on
        the refreshing thread returns immediately.

        :raises StravaError: Whatever the refresh exchange or the
            ``on_token_refresh`` callback raised.
        """
        self._single_flight(None, only_if_due=True)

    def force_refresh(self, refresh_token: Optional[str] = None) -> TokenResponse:
        """
        Refresh now, regardless of expiry, without overlapping another refresh.

        If a refresh is already in flight on another thread, its outcome is
        returned (or raised) instead of starting a second exchange.

        :param refresh_token: Token to use instead of the stored one.
        :type refresh_token: str or None
        :return: The token endpoint payload.
        :rtype: ~strava_client.models.auth.TokenResponse
        :raises StravaTokenRefreshError: If no refresh token is available.
        """
        return self._single_flight(refresh_token, only_if_due=False)

    def _single_flight(self, refresh_token: Optional[str], *, only_if_due: bool) -> Optional[TokenResponse]:
        with self._lock:
            if only_if_due and not self._is_due():
                return None
            future = self._refresh_future
            reentrant = future is not None and self._refresh_owner == threading.get_ident()
            owner = future is None
            if owner:
                future = Future()
                self._refresh_future = future
                self._refresh_owner = threading.get_ident()

        if reentrant:
            # Called from on_token_refresh while this thread holds the marker
            return None if only_if_due else self.refresh(refresh_token)

        if not owner:
            logger.debug("Waiting for in-flight token refresh")
            return future.result()

        try:
            response = self.refresh(refresh_token)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(response)
            return response
        finally:
            with self._lock:
                self._refresh_future = None
                self._refresh_owner = None

    def refresh(self, refresh_token: Optional[str] = None) -> TokenResponse:
        """
        Exchange a refresh token for new credentials.

        :param refresh_token: Token to use instead of the stored one.
        :type refresh_token: str or None
        :return: The token endpoint payload.
        :rtype: ~strava_client.models.auth.TokenResponse
        :raises StravaTokenRefreshError: If no refresh token is available.

        On failure the stored credentials are left unchanged.
        """
        current = self._tokens
        token = refresh_token or (current.refresh_token if current is not None else None)
        if not token:
            raise StravaTokenRefreshError("No refresh token available")

        response = self._exchange(token)
        tokens = response.to_tokens()
        self._tokens = tokens
        logger.info(
            "Access token refreshed, valid until %s",
            tokens.expires_at_datetime.isoformat(),
        )

        if self._on_token_refresh is not None:
            self._on_token_refresh(replace(tokens))
        return response
