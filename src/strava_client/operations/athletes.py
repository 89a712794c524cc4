# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Athlete operations namespace."""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

from ..core._transport import RequestConfig
from ..core.cancellation import CancellationToken

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["AthleteOperations"]


class AthleteOperations:
    """Namespace for athlete endpoints.

    Accessed via ``client.athletes``.

    :param client: The parent :class:`~strava_client.client.StravaClient` instance.
    :type client: ~strava_client.client.StravaClient

    Example::

        athlete = client.athletes.get()
        stats = client.athletes.get_stats(athlete["id"])
        print(stats["all_run_totals"]["distance"])
    """

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    def get(self, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        """Return the authenticated athlete.

        :param cancellation: Optional token that abandons the call when cancelled.
        :return: Detailed athlete representation.
        :rtype: :class:`dict`
        """
        return self._client._execute(RequestConfig("GET", "/athlete", cancellation=cancellation))

    def get_stats(self, athlete_id: int, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        """Return activity totals for an athlete.

        Only the authenticated athlete's own ID is accepted by Strava.

        :param athlete_id: Athlete ID.
        :type athlete_id: :class:`int`
        """
        return self._client._execute(
            RequestConfig("GET", f"/athletes/{athlete_id}/stats", cancellation=cancellation)
        )

    def get_zones(self, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        """Return the authenticated athlete's heart rate and power zones."""
        return self._client._execute(RequestConfig("GET", "/athlete/zones", cancellation=cancellation))

    def update(
        self,
        *,
        weight: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Update the authenticated athlete.

        Requires the ``profile:write`` scope.

        :param weight: Weight in kilograms.
        :type weight: :class:`float` or None
        :return: The updated athlete.
        :rtype: :class:`dict`
        """
        body: Dict[str, Any] = {}
        if weight is not None:
            body["weight"] = weight
        return self._client._execute(RequestConfig("PUT", "/athlete", json=body, cancellation=cancellation))
