# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Club operations namespace."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, TYPE_CHECKING

from ..core._transport import RequestConfig
from ..core.cancellation import CancellationToken
from ..core.pagination import iterate_pages

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["ClubOperations"]


class ClubOperations:
    """Namespace for club endpoints.

    Accessed via ``client.clubs``. List methods take ``page`` (1-based) and
    ``per_page`` and return a single page.

    :param client: The parent :class:`~strava_client.client.StravaClient` instance.
    :type client: ~strava_client.client.StravaClient

    Example::

        for club in client.clubs.list_athlete_clubs():
            members = client.clubs.get_all_members(club["id"])
            print(club["name"], len(members))
    """

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    def _page(
        self,
        path: str,
        page: int,
        per_page: int,
        cancellation: Optional[CancellationToken],
    ) -> List[Dict[str, Any]]:
        return self._client._execute(
            RequestConfig(
                "GET",
                path,
                params={"page": page, "per_page": per_page},
                cancellation=cancellation,
            )
        )

    def get(self, club_id: int, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        """Return a detailed club.

        :param club_id: Club ID.
        :type club_id: :class:`int`
        """
        return self._client._execute(RequestConfig("GET", f"/clubs/{club_id}", cancellation=cancellation))

    def list_athlete_clubs(
        self,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        """Return clubs the authenticated athlete belongs to."""
        return self._page("/athlete/clubs", page, per_page, cancellation)

    def get_activities(
        self,
        club_id: int,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        """Return recent activities by club members."""
        return self._page(f"/clubs/{club_id}/activities", page, per_page, cancellation)

    def get_members(
        self,
        club_id: int,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        return self._page(f"/clubs/{club_id}/members", page, per_page, cancellation)

    def get_admins(
        self,
        club_id: int,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        return self._page(f"/clubs/{club_id}/admins", page, per_page, cancellation)

    def iterate_members(
        self,
        club_id: int,
        *,
        per_page: int = 200,
        cancellation: Optional[CancellationToken] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Lazily iterate over every member of a club."""
        return iterate_pages(
            lambda page, size: self.get_members(club_id, page=page, per_page=size, cancellation=cancellation),
            per_page,
        )

    def get_all_members(
        self,
        club_id: int,
        *,
        per_page: int = 200,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        return list(self.iterate_members(club_id, per_page=per_page, cancellation=cancellation))
