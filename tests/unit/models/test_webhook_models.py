# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for webhook models."""

import pytest

from strava_client.models.webhook import WebhookEvent, WebhookSubscription
from tests.fixtures.test_data import SAMPLE_SUBSCRIPTION


class TestWebhookEvent:
    def test_to_dict_omits_missing_updates(self):
        event = WebhookEvent("activity", 1, "create", 2, 3, 4)
        assert event.to_dict() == {
            "object_type": "activity",
            "object_id": 1,
            "aspect_type": "create",
            "owner_id": 2,
            "subscription_id": 3,
            "event_time": 4,
        }

    def test_to_dict_includes_updates(self):
        event = WebhookEvent("athlete", 1, "update", 1, 3, 4, updates={"authorized": "false"})
        assert event.to_dict()["updates"] == {"authorized": "false"}

    def test_frozen(self):
        event = WebhookEvent("activity", 1, "create", 2, 3, 4)
        with pytest.raises(AttributeError):
            event.object_id = 5


class TestWebhookSubscription:
    def test_from_response(self):
        sub = WebhookSubscription.from_response(SAMPLE_SUBSCRIPTION)
        assert sub.id == 120475
        assert sub.application_id == 5
        assert sub.callback_url == "https://example.com/strava/webhook"
        assert sub.created_at == "2024-04-22T16:26:11.000000Z"
        assert sub.raw == SAMPLE_SUBSCRIPTION
