# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Activity upload operations namespace."""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import IO, Any, Dict, Optional, Union, TYPE_CHECKING

from ..core._transport import RequestConfig
from ..core.cancellation import CancellationToken, raise_if_cancelled
from ..core.errors import StravaApiError, StravaNetworkError, StravaValidationError

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["UploadOperations", "UPLOAD_DATA_TYPES"]

logger = logging.getLogger(__name__)

UPLOAD_DATA_TYPES = ("fit", "fit.gz", "tcx", "tcx.gz", "gpx", "gpx.gz")

FileInput = Union[bytes, IO[bytes], str, "os.PathLike[str]"]


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UploadOperations:
    """Namespace for activity file uploads.

    Accessed via ``client.uploads``.

    :param client: The parent :class:`~strava_client.client.StravaClient` instance.
    :type client: ~strava_client.client.StravaClient

    Example::

        upload = client.uploads.create("morning_ride.fit", "fit", name="Morning Ride")
        upload = client.uploads.wait_for_upload(upload["id"])
        print("Activity:", upload["activity_id"])
    """

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    def create(
        self,
        file: FileInput,
        data_type: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        trainer: Optional[bool] = None,
        commute: Optional[bool] = None,
        external_id: Optional[str] = None,
        filename: Optional[str] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Upload an activity file as a multipart request.

        Strava processes uploads asynchronously; poll with :meth:`get` or
        :meth:`wait_for_upload` until ``activity_id`` or ``error`` is set.

        :param file: File contents, a binary file object, or a path to the file.
        :param data_type: One of :data:`UPLOAD_DATA_TYPES`.
        :type data_type: :class:`str`
        :param name: Activity name.
        :param description: Activity description.
        :param trainer: Mark as a trainer activity.
        :param commute: Mark as a commute.
        :param external_id: Caller-chosen identifier for the upload.
        :param filename: File name sent in the multipart part; defaults to the
            path's base name or ``"activity.<data_type>"``.
        :return: Upload status.
        :rtype: :class:`dict`
        :raises StravaValidationError: If ``data_type`` is not supported.
        """
        if data_type not in UPLOAD_DATA_TYPES:
            raise StravaValidationError(f"data_type must be one of {', '.join(UPLOAD_DATA_TYPES)}")

        fields = {"data_type": data_type}
        optional = {
            "name": name,
            "description": description,
            "trainer": trainer,
            "commute": commute,
            "external_id": external_id,
        }
        fields.update({k: _form_value(v) for k, v in optional.items() if v is not None})

        if isinstance(file, (str, os.PathLike)):
            with open(file, "rb") as fh:
                content = fh.read()
            part_name = filename or os.path.basename(os.fspath(file))
        else:
            content = file if isinstance(file, bytes) else file.read()
            part_name = filename or f"activity.{data_type}"

        return self._client._execute(
            RequestConfig(
                "POST",
                "/uploads",
                data=fields,
                files={"file": (part_name, content)},
                cancellation=cancellation,
            )
        )

    def get(self, upload_id: int, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        """Return the processing status of an upload."""
        return self._client._execute(RequestConfig("GET", f"/uploads/{upload_id}", cancellation=cancellation))

    def wait_for_upload(
        self,
        upload_id: int,
        *,
        poll_interval: float = 2.0,
        max_wait: float = 60.0,
        cancellation: Optional[CancellationToken] = None,
    ) -> Dict[str, Any]:
        """Poll an upload until Strava has created the activity.

        :param upload_id: Upload ID returned by :meth:`create`.
        :type upload_id: :class:`int`
        :param poll_interval: Seconds between polls.
        :type poll_interval: :class:`float`
        :param max_wait: Seconds to keep polling before giving up.
        :type max_wait: :class:`float`
        :param cancellation: Cancels both an in-flight poll and the delay between polls.
        :return: The final upload status, with ``activity_id`` set.
        :rtype: :class:`dict`
        :raises StravaApiError: If Strava reports a processing error (duplicate
            activity, corrupt file, ...). The upload status is in ``details["upload"]``.
        :raises StravaNetworkError: If processing has not finished within ``max_wait``.
        :raises RequestCancelledError: If ``cancellation`` is cancelled while waiting.
        """
        deadline = time.monotonic() + max_wait
        while True:
            upload = self.get(upload_id, cancellation=cancellation)
            if upload.get("activity_id"):
                return upload
            if upload.get("error"):
                raise StravaApiError(
                    f"Upload {upload_id} failed: {upload['error']}",
                    status_code=None,
                    details={"upload": upload},
                )

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise StravaNetworkError(f"Upload {upload_id} still processing after {max_wait:g} seconds")
            logger.debug("Upload %s: %s", upload_id, upload.get("status"))
            self._sleep(min(poll_interval, remaining), cancellation)

    @staticmethod
    def _sleep(seconds: float, cancellation: Optional[CancellationToken]) -> None:
        if cancellation is None:
            time.sleep(seconds)
            return
        wakeup = threading.Event()
        unregister = cancellation.register(wakeup.set)
        try:
            wakeup.wait(seconds)
        finally:
            unregister()
        raise_if_cancelled(cancellation)
