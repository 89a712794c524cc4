# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Segment and segment effort operations namespace."""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union, TYPE_CHECKING

from ..core._transport import RequestConfig
from ..core.cancellation import CancellationToken
from ..core.errors import StravaValidationError
from ..core.pagination import iterate_pages

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["SegmentOperations", "DEFAULT_SEGMENT_STREAM_KEYS"]

DEFAULT_SEGMENT_STREAM_KEYS = ("distance", "altitude")
_ACTIVITY_TYPES = ("running", "riding")


def _format_date(value: Union[str, _dt.datetime, None]) -> Optional[str]:
    if isinstance(value, _dt.datetime):
        return value.replace(microsecond=0).isoformat()
    return value


class SegmentOperations:
    """Namespace for segment and segment effort endpoints.

    Accessed via ``client.segments``.

    :param client: The parent :class:`~strava_client.client.StravaClient` instance.
    :type client: ~strava_client.client.StravaClient

    Example::

        # [south-west lat, south-west lng, north-east lat, north-east lng]
        result = client.segments.explore([37.77, -122.45, 37.80, -122.40], activity_type="running")
        for segment in result["segments"]:
            print(segment["name"], segment["climb_category"])
    """

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    def _streams(
        self,
        path: str,
        keys: Optional[Sequence[str]],
        key_by_type: bool,
        cancellation: Optional[CancellationToken],
    ) -> Any:
        return self._client._execute(
            RequestConfig(
                "GET",
                path,
                params={
                    "keys": ",".join(keys or DEFAULT_SEGMENT_STREAM_KEYS),
                    "key_by_type": key_by_type,
                },
                cancellation=cancellation,
            )
        )

    # --------------------------------------------------------------- segments

    def get(self, segment_id: int, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        return self._client._execute(RequestConfig("GET", f"/segments/{segment_id}", cancellation=cancellation))

    def explore(
        self,
        bounds: Sequence[float],
        *,
        activity_type: Optional[str] = None,
        min_cat: Optional[int] = None,
        max_cat: Optional[int] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Return the top segments within a bounding box.

        :param bounds: ``[south-west lat, south-west lng, north-east lat, north-east lng]``.
        :type bounds: sequence of 4 :class:`float`
        :param activity_type: ``"running"`` or ``"riding"``.
        :type activity_type: :class:`str` or None
        :param min_cat: Minimum climb category.
        :param max_cat: Maximum climb category.
        :return: Explorer response with a ``segments`` list.
        :rtype: :class:`dict`
        :raises StravaValidationError: If ``bounds`` does not hold exactly four
            numbers or ``activity_type`` is unknown.
        """
        if isinstance(bounds, (str, bytes)) or len(bounds) != 4:
            raise StravaValidationError("bounds must contain exactly 4 coordinates")
        if activity_type is not None and activity_type not in _ACTIVITY_TYPES:
            raise StravaValidationError(f"activity_type must be one of {', '.join(_ACTIVITY_TYPES)}")
        return self._client._execute(
            RequestConfig(
                "GET",
                "/segments/explore",
                params={
                    "bounds": ",".join(str(b) for b in bounds),
                    "activity_type": activity_type,
                    "min_cat": min_cat,
                    "max_cat": max_cat,
                },
                cancellation=cancellation,
            )
        )

    def list_starred(
        self,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        """Return one page of the authenticated athlete's starred segments."""
        return self._client._execute(
            RequestConfig(
                "GET",
                "/segments/starred",
                params={"page": page, "per_page": per_page},
                cancellation=cancellation,
            )
        )

    def iterate_starred(
        self,
        *,
        per_page: int = 200,
        cancellation: Optional[CancellationToken] = None,
    ) -> Iterator[Dict[str, Any]]:
        return iterate_pages(
            lambda page, size: self.list_starred(page=page, per_page=size, cancellation=cancellation),
            per_page,
        )

    def get_all_starred(
        self,
        *,
        per_page: int = 200,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        return list(self.iterate_starred(per_page=per_page, cancellation=cancellation))

    def star(
        self,
        segment_id: int,
        starred: bool,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Star or unstar a segment.

        :param starred: ``True`` to star, ``False`` to unstar.
        :type starred: :class:`bool`
        :return: The updated segment.
        """
        return self._client._execute(
            RequestConfig(
                "PUT",
                f"/segments/{segment_id}/starred",
                json={"starred": starred},
                cancellation=cancellation,
            )
        )

    def get_streams(
        self,
        segment_id: int,
        *,
        keys: Optional[Sequence[str]] = None,
        key_by_type: bool = True,
        cancellation: Optional[CancellationToken] = None,
    ) -> Any:
        """Return segment streams; ``keys`` defaults to distance and altitude."""
        return self._streams(f"/segments/{segment_id}/streams", keys, key_by_type, cancellation)

    # ---------------------------------------------------------------- efforts

    def get_effort(self, effort_id: int, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        return self._client._execute(
            RequestConfig("GET", f"/segment_efforts/{effort_id}", cancellation=cancellation)
        )

    def list_efforts(
        self,
        segment_id: int,
        *,
        start_date_local: Union[str, _dt.datetime, None] = None,
        end_date_local: Union[str, _dt.datetime, None] = None,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        """Return the authenticated athlete's efforts on a segment.

        :param segment_id: Segment ID.
        :param start_date_local: Only efforts after this local time.
        :param end_date_local: Only efforts before this local time.
        :param per_page: Items per page.
        """
        return self._client._execute(
            RequestConfig(
                "GET",
                "/segment_efforts",
                params={
                    "segment_id": segment_id,
                    "start_date_local": _format_date(start_date_local),
                    "end_date_local": _format_date(end_date_local),
                    "per_page": per_page,
                },
                cancellation=cancellation,
            )
        )

    def get_effort_streams(
        self,
        effort_id: int,
        *,
        keys: Optional[Sequence[str]] = None,
        key_by_type: bool = True,
        cancellation: Optional[CancellationToken] = None,
    ) -> Any:
        return self._streams(f"/segment_efforts/{effort_id}/streams", keys, key_by_type, cancellation)
