# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""OAuth credential models for the Strava client."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core._error_codes import STRAVA_ERROR
from ..core.errors import StravaError

__all__ = ["StravaTokens", "TokenResponse"]


@dataclass
class StravaTokens:
    """
    Credential state held by a client.

    :param access_token: Bearer token sent with authenticated requests.
    :type access_token: str
    :param refresh_token: Token used to obtain a new access token.
    :type refresh_token: str
    :param expires_at: Expiry of ``access_token`` as epoch seconds.
    :type expires_at: int

    Example::

        client.set_tokens(
            StravaTokens(
                access_token=stored["access_token"],
                refresh_token=stored["refresh_token"],
                expires_at=stored["expires_at"],
            )
        )
    """

    access_token: str
    refresh_token: str
    expires_at: int

    @property
    def expires_at_datetime(self) -> _dt.datetime:
        """Expiry as a timezone-aware UTC datetime."""
        return _dt.datetime.fromtimestamp(self.expires_at, tz=_dt.timezone.utc)


@dataclass(frozen=True)
class TokenResponse:
    """
    Payload returned by the OAuth token endpoint (code exchange or refresh).

    :param access_token: New access token.
    :param refresh_token: Refresh token to use next time (may rotate).
    :param expires_at: Expiry as epoch seconds.
    :param expires_in: Seconds until expiry, when reported.
    :param token_type: Token type, normally ``"Bearer"``.
    :param athlete: Summary athlete returned with a code exchange, if any.
    :param raw: The unmodified JSON payload.
    """

    access_token: str
    refresh_token: str
    expires_at: int
    expires_in: Optional[int] = None
    token_type: str = "Bearer"
    athlete: Optional[Dict[str, Any]] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Any) -> "TokenResponse":
        if not isinstance(data, dict):
            raise StravaError("Malformed token response: expected a JSON object", code=STRAVA_ERROR)
        missing = [k for k in ("access_token", "refresh_token", "expires_at") if data.get(k) in (None, "")]
        if missing:
            raise StravaError(
                f"Malformed token response: missing {', '.join(missing)}",
                code=STRAVA_ERROR,
                details={"missing": missing},
            )
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=int(data["expires_at"]),
            expires_in=data.get("expires_in"),
            token_type=data.get("token_type") or "Bearer",
            athlete=data.get("athlete"),
            raw=dict(data),
        )

    def to_tokens(self) -> StravaTokens:
        return StravaTokens(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=self.expires_at,
        )
