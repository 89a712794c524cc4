# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest
from unittest.mock import MagicMock

from strava_client.client import StravaClient
from strava_client.core._transport import RequestConfig, ResponseFormat
from strava_client.models.webhook import WebhookEvent, WebhookSubscription
from strava_client.operations.webhooks import WebhookOperations
from tests.fixtures.test_data import SAMPLE_SUBSCRIPTION, SAMPLE_WEBHOOK_EVENT


class TestWebhookOperations(unittest.TestCase):
    """Unit tests for the client.webhooks namespace (WebhookOperations)."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.client = StravaClient("12345", "secret")
        self.client._transport = MagicMock()
        self.execute = self.client._transport.execute

    def test_namespace_exists(self):
        self.assertIsInstance(self.client.webhooks, WebhookOperations)

    def test_create_subscription(self):
        self.execute.return_value = {"id": 120475}
        sub = self.client.webhooks.create_subscription("https://example.com/hook", "verify-me")

        self.assertEqual(sub, WebhookSubscription(id=120475))
        self.execute.assert_called_once_with(
            RequestConfig(
                "POST",
                "/push_subscriptions",
                data={
                    "client_id": "12345",
                    "client_secret": "secret",
                    "callback_url": "https://example.com/hook",
                    "verify_token": "verify-me",
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                skip_auth=True,
                context="Create Webhook Subscription",
            )
        )

    def test_get_subscription_returns_first(self):
        self.execute.return_value = [SAMPLE_SUBSCRIPTION, dict(SAMPLE_SUBSCRIPTION, id=1)]
        sub = self.client.webhooks.get_subscription()
        self.assertEqual(sub.id, 120475)
        config = self.execute.call_args[0][0]
        self.assertEqual(config.params, {"client_id": "12345", "client_secret": "secret"})
        self.assertTrue(config.skip_auth)

    def test_get_subscription_none(self):
        self.execute.return_value = []
        self.assertIsNone(self.client.webhooks.get_subscription())

    def test_delete_subscription(self):
        self.assertIsNone(self.client.webhooks.delete_subscription(120475))
        self.execute.assert_called_once_with(
            RequestConfig(
                "POST",
                "/push_subscriptions/120475",
                params={"client_id": "12345", "client_secret": "secret"},
                headers={"X-HTTP-Method-Override": "DELETE"},
                skip_auth=True,
                context="Delete Webhook Subscription",
                response_format=ResponseFormat.NONE,
            )
        )

    def test_helpers_delegate(self):
        params = {"hub.mode": "subscribe", "hub.verify_token": "t", "hub.challenge": "c"}
        self.assertEqual(self.client.webhooks.validate_verification(params, "t"), "c")
        self.assertIsInstance(self.client.webhooks.parse_event(SAMPLE_WEBHOOK_EVENT), WebhookEvent)
        self.execute.assert_not_called()
