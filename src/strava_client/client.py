# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, TypeVar
from urllib.parse import urlencode

import requests

from .core._auth import _TokenManager
from .core._http import _HttpClient
from .core._transport import RequestConfig, ResponseFormat, _Transport
from .core.cancellation import CancellationToken
from .core.config import StravaConfig
from .core.errors import StravaError, StravaValidationError
from .core.pagination import PageFetcher, collect_all, iterate_pages
from .core.rate_limit import RateLimitInfo
from .core.telemetry import create_telemetry_manager
from .models.auth import StravaTokens, TokenResponse
from .operations.activities import ActivityOperations
from .operations.athletes import AthleteOperations
from .operations.clubs import ClubOperations
from .operations.gear import GearOperations
from .operations.routes import RouteOperations
from .operations.segments import SegmentOperations
from .operations.uploads import UploadOperations
from .operations.webhooks import WebhookOperations

logger = logging.getLogger(__name__)

T = TypeVar("T")

_APPROVAL_PROMPTS = ("auto", "force")


@dataclass(frozen=True)
class ClientInfo:
    """Snapshot of a client's authentication and rate-limit state.

    :param has_tokens: Whether credentials are set.
    :param is_authenticated: Whether the access token has not yet expired.
    :param token_expires_at: Access token expiry, or ``None`` without credentials.
    :param rate_limit_info: Last observed rate-limit snapshot.
    """

    has_tokens: bool
    is_authenticated: bool
    token_expires_at: Optional[_dt.datetime]
    rate_limit_info: Optional[RateLimitInfo]


class StravaClient:
    """
    High-level client for the Strava REST API v3.

    The client owns one athlete's credentials. It refreshes the access token
    before it expires (at most one refresh exchange runs at a time, however many
    threads are calling), records the rate-limit headers of every response, and
    raises a :class:`~strava_client.core.errors.StravaError` subclass for every
    failure.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager enables connection pooling and
        releases resources on exit::

            with StravaClient(client_id, client_secret) as client:
                client.set_tokens(tokens)
                athlete = client.athletes.get()

    **Without Context Manager**:
        Call ``close()`` when done::

            client = StravaClient(client_id, client_secret)
            try:
                athlete = client.athletes.get()
            finally:
                client.close()

    Operations are organized under namespaces:

    - ``client.athletes``: the authenticated athlete, stats and zones
    - ``client.activities``: activities, streams, laps, comments, kudos
    - ``client.clubs``: clubs and club members
    - ``client.gear``: gear lookup
    - ``client.routes``: routes and GPX/TCX exports
    - ``client.segments``: segments, segment efforts, explorer
    - ``client.uploads``: activity file uploads
    - ``client.webhooks``: push subscriptions and webhook helpers

    :param client_id: Strava application client ID.
    :type client_id: :class:`str`
    :param client_secret: Strava application client secret.
    :type client_secret: :class:`str`
    :param redirect_uri: OAuth redirect URI; required for :meth:`get_authorization_url`.
    :type redirect_uri: :class:`str` or None
    :param config: Optional configuration. Defaults to :meth:`StravaConfig.defaults`.
    :type config: ~strava_client.core.config.StravaConfig or None

    :raises ValueError: If ``client_id`` or ``client_secret`` is missing.

    Example:
        Authorize, then read data::

            client = StravaClient(
                "12345",
                "secret",
                redirect_uri="http://localhost:8000/callback",
                config=StravaConfig(on_token_refresh=save_tokens),
            )
            print(client.get_authorization_url(scope="read,activity:read_all"))

            # ... after the user is redirected back with ?code=...
            client.exchange_authorization_code(code)
            for activity in client.activities.iterate():
                print(activity["name"])
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: Optional[str] = None,
        config: Optional[StravaConfig] = None,
    ) -> None:
        self.client_id = str(client_id or "").strip()
        self.client_secret = str(client_secret or "").strip()
        if not self.client_id:
            raise ValueError("client_id is required.")
        if not self.client_secret:
            raise ValueError("client_secret is required.")
        self.redirect_uri = redirect_uri or None
        self._config = config or StravaConfig.defaults()

        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False
        self._http = _HttpClient(timeout=self._config.timeout, max_workers=self._config.max_workers)
        self._tokens = _TokenManager(
            self._exchange_refresh_token,
            refresh_buffer=self._config.refresh_buffer,
            on_token_refresh=self._config.on_token_refresh,
        )
        self._transport = _Transport(
            self._http,
            self._tokens,
            api_base_url=self._config.api_base_url,
            telemetry=create_telemetry_manager(self._config.telemetry),
            auto_refresh=self._config.auto_refresh,
        )

        # Initialize operation namespaces
        self.athletes = AthleteOperations(self)
        self.activities = ActivityOperations(self)
        self.clubs = ClubOperations(self)
        self.gear = GearOperations(self)
        self.routes = RouteOperations(self)
        self.segments = SegmentOperations(self)
        self.uploads = UploadOperations(self)
        self.webhooks = WebhookOperations(self)

    @property
    def config(self) -> StravaConfig:
        return self._config

    def __enter__(self) -> "StravaClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling. All operations within
        the context will reuse this session.

        :return: The client instance.
        :rtype: StravaClient
        """
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
            self._http.use_session(self._session)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """
        Exit the context manager with cleanup.

        :return: None (exceptions are not suppressed).
        """
        self.close()

    def close(self) -> None:
        """
        Explicitly close the client and release resources.

        Stops the dispatch threads and closes the HTTP session (if any). Safe
        to call multiple times. Credentials are kept.
        """
        self._http.close()
        if self._session is not None and self._owns_session:
            self._session.close()
        self._session = None
        self._owns_session = False

    def _execute(self, config: RequestConfig) -> Any:
        return self._transport.execute(config)

    # ---------------------------------------------------------------- tokens

    def set_tokens(self, tokens: StravaTokens) -> None:
        """Set the credentials used for authenticated calls. A copy is stored."""
        self._tokens.set_tokens(tokens)

    def get_tokens(self) -> Optional[StravaTokens]:
        """Return a copy of the current credentials, or ``None``."""
        return self._tokens.get_tokens()

    def clear_tokens(self) -> None:
        self._tokens.clear_tokens()

    def has_valid_tokens(self) -> bool:
        """Return ``True`` if credentials are set and the access token has not expired.

        The refresh buffer is not taken into account: a token that is due for
        refresh but not yet expired is still valid.
        """
        return self._tokens.has_valid_tokens()

    # ----------------------------------------------------------------- OAuth

    def get_authorization_url(
        self,
        scope: str = "activity:read_all",
        state: Optional[str] = None,
        approval_prompt: str = "auto",
    ) -> str:
        """
        Build the URL that starts the OAuth authorization flow.

        :param scope: Comma-separated OAuth scopes.
        :type scope: :class:`str`
        :param state: Opaque value returned unchanged in the redirect.
        :type state: :class:`str` or None
        :param approval_prompt: ``"auto"`` or ``"force"``.
        :type approval_prompt: :class:`str`
        :return: Authorization URL.
        :rtype: :class:`str`
        :raises StravaValidationError: If the client has no redirect URI or
            ``approval_prompt`` is invalid.
        """
        if not self.redirect_uri:
            raise StravaValidationError("Redirect URI is required for OAuth flow")
        if approval_prompt not in _APPROVAL_PROMPTS:
            raise StravaValidationError("approval_prompt must be 'auto' or 'force'")

        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "approval_prompt": approval_prompt,
            "scope": scope,
        }
        if state:
            params["state"] = state
        return f"{self._config.oauth_base_url.rstrip('/')}/authorize?{urlencode(params)}"

    def _token_request(self, body: dict, context: str) -> TokenResponse:
        data = self._execute(
            RequestConfig(
                "POST",
                "/token",
                json=dict(body, client_id=self.client_id, client_secret=self.client_secret),
                base_url=self._config.oauth_base_url,
                skip_auth=True,
                skip_rate_limit=True,
                context=context,
            )
        )
        return TokenResponse.from_response(data)

    def _exchange_refresh_token(self, refresh_token: str) -> TokenResponse:
        return self._token_request(
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
            "Refresh Access Token",
        )

    def exchange_authorization_code(self, code: str) -> TokenResponse:
        """
        Exchange the code from the OAuth redirect for tokens and store them.

        :param code: The ``code`` query parameter of the redirect.
        :type code: :class:`str`
        :return: The token endpoint payload, including the summary athlete.
        :rtype: ~strava_client.models.auth.TokenResponse
        """
        response = self._token_request(
            {"code": code, "grant_type": "authorization_code"},
            "Exchange Authorization Code",
        )
        tokens = response.to_tokens()
        self._tokens.set_tokens(tokens)
        logger.info("Authorization code exchanged, token valid until %s", tokens.expires_at_datetime.isoformat())
        return response

    def refresh_access_token(self, refresh_token: Optional[str] = None) -> TokenResponse:
        """
        Refresh the access token now, regardless of its expiry.

        Does not overlap an automatic refresh: if one is already running, its
        outcome is returned instead of starting a second exchange.

        :param refresh_token: Token to use instead of the stored one.
        :type refresh_token: :class:`str` or None
        :return: The token endpoint payload. The new tokens are stored and
            passed to ``on_token_refresh``.
        :rtype: ~strava_client.models.auth.TokenResponse
        :raises StravaTokenRefreshError: If no refresh token is available.
        """
        return self._tokens.force_refresh(refresh_token)

    def deauthorize(self, *, cancellation: Optional[CancellationToken] = None) -> None:
        """Revoke the application's access for this athlete and clear the credentials."""
        self._execute(
            RequestConfig(
                "POST",
                "/deauthorize",
                base_url=self._config.oauth_base_url,
                skip_rate_limit=True,
                context="Deauthorize",
                response_format=ResponseFormat.NONE,
                cancellation=cancellation,
            )
        )
        self._tokens.clear_tokens()
        logger.info("Application deauthorized, credentials cleared")

    # ------------------------------------------------------------ pagination

    def paginate(self, fetch_page: PageFetcher, per_page: int = 200) -> Iterator[T]:
        """
        Lazily iterate over every item of a paged endpoint.

        :param fetch_page: Called as ``fetch_page(page, per_page)``.
        :param per_page: Page size.
        :raises StravaValidationError: If ``per_page`` is not a positive integer.

        Example::

            for member in client.paginate(
                lambda page, size: client.clubs.get_members(club_id, page=page, per_page=size)
            ):
                print(member["firstname"])
        """
        return iterate_pages(fetch_page, per_page)

    def collect_all(self, fetch_page: PageFetcher, per_page: int = 200) -> List[T]:
        """Fetch every page of a paged endpoint into one list. See :meth:`paginate`."""
        return collect_all(fetch_page, per_page)

    # --------------------------------------------------------------- status

    def get_rate_limit_info(self) -> Optional[RateLimitInfo]:
        """Return the rate-limit snapshot of the last response that carried one."""
        return self._transport.rate_limit_info

    def test_connection(self) -> bool:
        """Return ``True`` if the authenticated athlete can be fetched."""
        try:
            self.athletes.get()
        except StravaError as exc:
            logger.debug("Connection test failed: %s", exc)
            return False
        return True

    def get_client_info(self) -> ClientInfo:
        tokens = self._tokens.get_tokens()
        return ClientInfo(
            has_tokens=tokens is not None,
            is_authenticated=self._tokens.has_valid_tokens(),
            token_expires_at=tokens.expires_at_datetime if tokens is not None else None,
            rate_limit_info=self._transport.rate_limit_info,
        )


__all__ = ["StravaClient", "ClientInfo"]
