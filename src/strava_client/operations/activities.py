# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Activity operations namespace."""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union, TYPE_CHECKING

import pandas as pd

from ..core._transport import RequestConfig
from ..core.cancellation import CancellationToken
from ..core.pagination import iterate_pages
from ..utils._pandas import records_to_dataframe, streams_to_dataframe

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["ActivityOperations", "DEFAULT_ACTIVITY_STREAM_KEYS"]

DEFAULT_ACTIVITY_STREAM_KEYS = (
    "time",
    "distance",
    "altitude",
    "heartrate",
    "cadence",
    "watts",
    "temp",
    "velocity_smooth",
    "grade_smooth",
)

Timestamp = Union[int, float, _dt.datetime]


def _to_epoch(value: Optional[Timestamp]) -> Optional[int]:
    """Convert a datetime (naive values are taken as UTC) or epoch number to epoch seconds."""
    if value is None:
        return None
    if isinstance(value, _dt.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=_dt.timezone.utc)
        return int(value.timestamp())
    return int(value)


def _to_iso(value: Union[str, _dt.datetime]) -> str:
    if isinstance(value, _dt.datetime):
        return value.replace(microsecond=0).isoformat()
    return value


class ActivityOperations:
    """Namespace for activity endpoints.

    Accessed via ``client.activities``.

    :param client: The parent :class:`~strava_client.client.StravaClient` instance.
    :type client: ~strava_client.client.StravaClient

    Example:
        Walk every activity after a date, fetching pages lazily::

            import datetime

            since = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
            for activity in client.activities.iterate(after=since):
                print(activity["name"], activity["distance"])

        Load streams into a DataFrame::

            df = client.activities.get_streams_dataframe(activity_id, keys=["time", "heartrate"])
    """

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    # ------------------------------------------------------------------ list

    def list(
        self,
        *,
        before: Optional[Timestamp] = None,
        after: Optional[Timestamp] = None,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        """Return one page of the authenticated athlete's activities.

        :param before: Only activities that started before this time
            (:class:`datetime.datetime` or epoch seconds).
        :param after: Only activities that started after this time.
        :param page: 1-based page number.
        :type page: :class:`int`
        :param per_page: Items per page (Strava caps this at 200).
        :type per_page: :class:`int`
        :param cancellation: Optional token that abandons the call when cancelled.
        :return: Summary activities, newest first.
        :rtype: :class:`list` of :class:`dict`
        """
        params = {
            "before": _to_epoch(before),
            "after": _to_epoch(after),
            "page": page,
            "per_page": per_page,
        }
        return self._client._execute(
            RequestConfig("GET", "/athlete/activities", params=params, cancellation=cancellation)
        )

    def iterate(
        self,
        *,
        before: Optional[Timestamp] = None,
        after: Optional[Timestamp] = None,
        per_page: int = 200,
        cancellation: Optional[CancellationToken] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Lazily iterate over all matching activities.

        Pages are fetched only as items are consumed; breaking out of the loop
        stops further requests.

        :param per_page: Page size used for each request.
        :type per_page: :class:`int`
        :raises StravaValidationError: If ``per_page`` is not a positive integer.
        """
        return iterate_pages(
            lambda page, size: self.list(
                before=before, after=after, page=page, per_page=size, cancellation=cancellation
            ),
            per_page,
        )

    def get_all(
        self,
        *,
        before: Optional[Timestamp] = None,
        after: Optional[Timestamp] = None,
        per_page: int = 200,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch every matching activity. See :meth:`iterate`."""
        return list(self.iterate(before=before, after=after, per_page=per_page, cancellation=cancellation))

    # ------------------------------------------------------------ single item

    def get(
        self,
        activity_id: int,
        *,
        include_all_efforts: bool = False,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Return a detailed activity.

        :param activity_id: Activity ID.
        :type activity_id: :class:`int`
        :param include_all_efforts: Include all segment efforts.
        :type include_all_efforts: :class:`bool`
        """
        return self._client._execute(
            RequestConfig(
                "GET",
                f"/activities/{activity_id}",
                params={"include_all_efforts": include_all_efforts},
                cancellation=cancellation,
            )
        )

    def get_streams(
        self,
        activity_id: int,
        *,
        keys: Optional[Sequence[str]] = None,
        key_by_type: bool = True,
        cancellation: Optional[CancellationToken] = None,
    ) -> Any:
        """Return time-series streams for an activity.

        :param keys: Stream types to request. Defaults to
            :data:`DEFAULT_ACTIVITY_STREAM_KEYS`.
        :type keys: :class:`list` of :class:`str` or None
        :param key_by_type: Return a mapping keyed by stream type instead of a list.
        :type key_by_type: :class:`bool`
        """
        return self._client._execute(
            RequestConfig(
                "GET",
                f"/activities/{activity_id}/streams",
                params={
                    "keys": ",".join(keys or DEFAULT_ACTIVITY_STREAM_KEYS),
                    "key_by_type": key_by_type,
                },
                cancellation=cancellation,
            )
        )

    def get_zones(self, activity_id: int, *, cancellation: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        """Return heart rate and power zone distributions (Strava subscribers only)."""
        return self._client._execute(
            RequestConfig("GET", f"/activities/{activity_id}/zones", cancellation=cancellation)
        )

    def get_laps(self, activity_id: int, *, cancellation: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return self._client._execute(
            RequestConfig("GET", f"/activities/{activity_id}/laps", cancellation=cancellation)
        )

    # ------------------------------------------------------------------ write

    def create(
        self,
        name: str,
        sport_type: str,
        start_date_local: Union[str, _dt.datetime],
        elapsed_time: int,
        *,
        type: Optional[str] = None,
        description: Optional[str] = None,
        distance: Optional[float] = None,
        trainer: Optional[bool] = None,
        commute: Optional[bool] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Create a manual activity.

        :param name: Activity name.
        :type name: :class:`str`
        :param sport_type: Sport type, for example ``"Run"`` or ``"Ride"``.
        :type sport_type: :class:`str`
        :param start_date_local: Local start time (ISO 8601 string or datetime).
        :param elapsed_time: Duration in seconds.
        :type elapsed_time: :class:`int`
        :param type: Legacy activity type; prefer ``sport_type``.
        :param description: Description.
        :param distance: Distance in meters.
        :param trainer: Mark as a trainer activity.
        :param commute: Mark as a commute.
        :return: The created activity.
        :rtype: :class:`dict`

        Example::

            activity = client.activities.create(
                "Lunch Run", "Run", "2024-05-01T12:00:00", 1800, distance=5000.0
            )
        """
        body: Dict[str, Any] = {
            "name": name,
            "sport_type": sport_type,
            "start_date_local": _to_iso(start_date_local),
            "elapsed_time": elapsed_time,
        }
        optional = {
            "type": type,
            "description": description,
            "distance": distance,
            "trainer": trainer,
            "commute": commute,
        }
        body.update({k: v for k, v in optional.items() if v is not None})
        return self._client._execute(RequestConfig("POST", "/activities", json=body, cancellation=cancellation))

    def update(
        self,
        activity_id: int,
        *,
        name: Optional[str] = None,
        sport_type: Optional[str] = None,
        description: Optional[str] = None,
        gear_id: Optional[str] = None,
        trainer: Optional[bool] = None,
        commute: Optional[bool] = None,
        hide_from_home: Optional[bool] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Update an activity. Only the fields that are passed are sent.

        :param gear_id: Gear ID, or ``"none"`` to clear the gear.
        :param hide_from_home: Mute the activity.
        :return: The updated activity.
        :rtype: :class:`dict`
        """
        changes = {
            "name": name,
            "sport_type": sport_type,
            "description": description,
            "gear_id": gear_id,
            "trainer": trainer,
            "commute": commute,
            "hide_from_home": hide_from_home,
        }
        body = {k: v for k, v in changes.items() if v is not None}
        return self._client._execute(
            RequestConfig("PUT", f"/activities/{activity_id}", json=body, cancellation=cancellation)
        )

    # ----------------------------------------------------------------- social

    def get_comments(
        self,
        activity_id: int,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        return self._client._execute(
            RequestConfig(
                "GET",
                f"/activities/{activity_id}/comments",
                params={"page": page, "per_page": per_page},
                cancellation=cancellation,
            )
        )

    def get_kudoers(
        self,
        activity_id: int,
        *,
        page: int = 1,
        per_page: int = 30,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Dict[str, Any]]:
        return self._client._execute(
            RequestConfig(
                "GET",
                f"/activities/{activity_id}/kudos",
                params={"page": page, "per_page": per_page},
                cancellation=cancellation,
            )
        )

    # ------------------------------------------------------------- dataframe

    def get_dataframe(
        self,
        *,
        before: Optional[Timestamp] = None,
        after: Optional[Timestamp] = None,
        per_page: int = 200,
        cancellation: Optional[CancellationToken] = None,
    ) -> pd.DataFrame:
        """Fetch every matching activity into a :class:`pandas.DataFrame`.

        Nested objects are flattened into dotted columns (``map.summary_polyline``).

        :rtype: ~pandas.DataFrame
        """
        return records_to_dataframe(
            self.get_all(before=before, after=after, per_page=per_page, cancellation=cancellation)
        )

    def get_streams_dataframe(
        self,
        activity_id: int,
        *,
        keys: Optional[Sequence[str]] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> pd.DataFrame:
        """Fetch an activity's streams as a :class:`pandas.DataFrame`, one column per stream.

        :rtype: ~pandas.DataFrame
        """
        return streams_to_dataframe(
            self.get_streams(activity_id, keys=keys, key_by_type=True, cancellation=cancellation)
        )
