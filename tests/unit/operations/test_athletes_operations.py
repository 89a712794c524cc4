# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest
from unittest.mock import MagicMock

from strava_client.client import StravaClient
from strava_client.core._transport import RequestConfig
from strava_client.core.cancellation import CancellationToken
from strava_client.operations.athletes import AthleteOperations


class TestAthleteOperations(unittest.TestCase):
    """Unit tests for the client.athletes namespace (AthleteOperations)."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.client = StravaClient("12345", "secret")
        self.client._transport = MagicMock()

    def test_namespace_exists(self):
        self.assertIsInstance(self.client.athletes, AthleteOperations)

    def test_get(self):
        self.client._transport.execute.return_value = {"id": 1}
        result = self.client.athletes.get()
        self.client._transport.execute.assert_called_once_with(RequestConfig("GET", "/athlete"))
        self.assertEqual(result, {"id": 1})

    def test_get_forwards_cancellation(self):
        token = CancellationToken()
        self.client.athletes.get(cancellation=token)
        config = self.client._transport.execute.call_args[0][0]
        self.assertIs(config.cancellation, token)

    def test_get_stats(self):
        self.client.athletes.get_stats(134815)
        self.client._transport.execute.assert_called_once_with(RequestConfig("GET", "/athletes/134815/stats"))

    def test_get_zones(self):
        self.client.athletes.get_zones()
        self.client._transport.execute.assert_called_once_with(RequestConfig("GET", "/athlete/zones"))

    def test_update_weight(self):
        self.client.athletes.update(weight=61.5)
        self.client._transport.execute.assert_called_once_with(
            RequestConfig("PUT", "/athlete", json={"weight": 61.5})
        )
