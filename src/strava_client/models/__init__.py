# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the Strava client.

Endpoint payloads are returned as plain JSON (``dict`` / ``list``); the models
here cover the shapes the client itself depends on.
"""

from .auth import StravaTokens, TokenResponse
from .webhook import (
    WEBHOOK_ASPECT_TYPES,
    WEBHOOK_OBJECT_TYPES,
    WebhookEvent,
    WebhookSubscription,
)

__all__ = [
    "StravaTokens",
    "TokenResponse",
    "WEBHOOK_ASPECT_TYPES",
    "WEBHOOK_OBJECT_TYPES",
    "WebhookEvent",
    "WebhookSubscription",
]
