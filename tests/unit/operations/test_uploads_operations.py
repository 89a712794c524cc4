# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import io
import threading
import unittest
from unittest.mock import MagicMock, patch

from strava_client.client import StravaClient
from strava_client.core._transport import RequestConfig
from strava_client.core.cancellation import CancellationToken, RequestCancelledError
from strava_client.core.errors import StravaApiError, StravaNetworkError, StravaValidationError
from strava_client.operations.uploads import UploadOperations
from tests.fixtures.test_data import SAMPLE_UPLOAD_PROCESSING


class TestUploadCreate(unittest.TestCase):
    """Unit tests for client.uploads.create."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.client = StravaClient("12345", "secret")
        self.client._transport = MagicMock()
        self.execute = self.client._transport.execute

    def test_namespace_exists(self):
        self.assertIsInstance(self.client.uploads, UploadOperations)

    def test_create_from_bytes(self):
        self.client.uploads.create(
            b"FITDATA",
            "fit",
            name="Morning Ride",
            trainer=True,
            commute=False,
            external_id="ride-1",
        )
        self.execute.assert_called_once_with(
            RequestConfig(
                "POST",
                "/uploads",
                data={
                    "data_type": "fit",
                    "name": "Morning Ride",
                    "trainer": "true",
                    "commute": "false",
                    "external_id": "ride-1",
                },
                files={"file": ("activity.fit", b"FITDATA")},
            )
        )

    def test_create_from_file_object(self):
        self.client.uploads.create(io.BytesIO(b"<gpx/>"), "gpx", filename="route.gpx")
        config = self.execute.call_args[0][0]
        self.assertEqual(config.files, {"file": ("route.gpx", b"<gpx/>")})
        self.assertEqual(config.data, {"data_type": "gpx"})

    def test_create_from_path(self):
        import os
        import tempfile

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "ride.tcx")
            with open(path, "wb") as fh:
                fh.write(b"<tcx/>")
            self.client.uploads.create(path, "tcx")
        self.assertEqual(self.execute.call_args[0][0].files, {"file": ("ride.tcx", b"<tcx/>")})

    def test_rejects_unknown_data_type(self):
        with self.assertRaises(StravaValidationError):
            self.client.uploads.create(b"x", "csv")
        self.execute.assert_not_called()

    def test_get(self):
        self.client.uploads.get(2680)
        self.execute.assert_called_once_with(RequestConfig("GET", "/uploads/2680"))


class TestWaitForUpload(unittest.TestCase):
    """Unit tests for client.uploads.wait_for_upload."""

    def setUp(self):
        self.client = StravaClient("12345", "secret")
        self.client._transport = MagicMock()
        self.execute = self.client._transport.execute

    @patch("strava_client.operations.uploads.time.sleep")
    def test_returns_when_activity_created(self, mock_sleep):
        done = dict(SAMPLE_UPLOAD_PROCESSING, status="Your activity is ready.", activity_id=6789)
        self.execute.side_effect = [SAMPLE_UPLOAD_PROCESSING, SAMPLE_UPLOAD_PROCESSING, done]

        result = self.client.uploads.wait_for_upload(2680, poll_interval=0.5)

        self.assertEqual(result["activity_id"], 6789)
        self.assertEqual(self.execute.call_count, 3)
        self.assertEqual(mock_sleep.call_count, 2)
        mock_sleep.assert_called_with(0.5)

    @patch("strava_client.operations.uploads.time.sleep")
    def test_raises_on_processing_error(self, mock_sleep):
        failed = dict(SAMPLE_UPLOAD_PROCESSING, error="duplicate of activity 123", status="There was an error")
        self.execute.side_effect = [failed]

        with self.assertRaises(StravaApiError) as ctx:
            self.client.uploads.wait_for_upload(2680)

        self.assertIn("duplicate of activity 123", ctx.exception.message)
        self.assertIsNone(ctx.exception.status_code)
        self.assertEqual(ctx.exception.details["upload"], failed)
        mock_sleep.assert_not_called()

    def test_gives_up_after_max_wait(self):
        self.execute.return_value = SAMPLE_UPLOAD_PROCESSING
        with self.assertRaises(StravaNetworkError):
            self.client.uploads.wait_for_upload(2680, poll_interval=0.01, max_wait=0.05)
        self.assertGreaterEqual(self.execute.call_count, 2)

    def test_cancellation_interrupts_delay(self):
        self.execute.return_value = SAMPLE_UPLOAD_PROCESSING
        token = CancellationToken()
        threading.Timer(0.05, token.cancel).start()
        with self.assertRaises(RequestCancelledError):
            self.client.uploads.wait_for_upload(2680, poll_interval=10.0, max_wait=30.0, cancellation=token)
        self.assertEqual(self.execute.call_count, 1)
