# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Route operations namespace."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..core._transport import RequestConfig, ResponseFormat
from ..core.cancellation import CancellationToken

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["RouteOperations"]


class RouteOperations:
    """Namespace for route endpoints.

    Accessed via ``client.routes``.

    :param client: The parent :class:`~strava_client.client.StravaClient` instance.
    :type client: ~strava_client.client.StravaClient

    Example::

        gpx = client.routes.export_gpx(route_id)
        with open("route.gpx", "w", encoding="utf-8") as fh:
            fh.write(gpx)
    """

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    def get(self, route_id: int, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        return self._client._execute(RequestConfig("GET", f"/routes/{route_id}", cancellation=cancellation))

    def list_athlete_routes(
        self,
        athlete_id: int,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        """Return routes created by an athlete.

        :param athlete_id: Athlete ID.
        :type athlete_id: :class:`int`
        """
        return self._client._execute(
            RequestConfig(
                "GET",
                f"/athletes/{athlete_id}/routes",
                params={"page": page, "per_page": per_page},
                cancellation=cancellation,
            )
        )

    def export_gpx(self, route_id: int, *, cancellation: Optional[CancellationToken] = None) -> str:
        """Return the route as a GPX document.

        :rtype: :class:`str`
        """
        return self._client._execute(
            RequestConfig(
                "GET",
                f"/routes/{route_id}/export_gpx",
                cancellation=cancellation,
                response_format=ResponseFormat.TEXT,
            )
        )

    def export_tcx(self, route_id: int, *, cancellation: Optional[CancellationToken] = None) -> str:
        """Return the route as a TCX document.

        :rtype: :class:`str`
        """
        return self._client._execute(
            RequestConfig(
                "GET",
                f"/routes/{route_id}/export_tcx",
                cancellation=cancellation,
                response_format=ResponseFormat.TEXT,
            )
        )

    def get_streams(self, route_id: int, *, cancellation: Optional[CancellationToken] = None) -> Any:
        return self._client._execute(
            RequestConfig("GET", f"/routes/{route_id}/streams", cancellation=cancellation)
        )
