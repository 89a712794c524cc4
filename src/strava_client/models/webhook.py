# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Webhook (push subscription) data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

__all__ = [
    "WEBHOOK_OBJECT_TYPES",
    "WEBHOOK_ASPECT_TYPES",
    "WebhookEvent",
    "WebhookSubscription",
]

WEBHOOK_OBJECT_TYPES = ("activity", "athlete")
WEBHOOK_ASPECT_TYPES = ("create", "update", "delete")


@dataclass(frozen=True)
class WebhookEvent:
    """
    Event pushed by Strava to a subscription callback URL.

    :param object_type: ``"activity"`` or ``"athlete"``.
    :type object_type: str
    :param object_id: ID of the affected activity or athlete.
    :type object_id: int
    :param aspect_type: ``"create"``, ``"update"`` or ``"delete"``.
    :type aspect_type: str
    :param owner_id: ID of the athlete who owns the object.
    :type owner_id: int
    :param subscription_id: Push subscription ID.
    :type subscription_id: int
    :param event_time: Epoch seconds of the event.
    :type event_time: int
    :param updates: Changed fields; only present on update events
        (e.g. ``{"title": "Morning Run"}`` or ``{"authorized": "false"}`` on deauthorization).
    :type updates: dict[str, Any] | None
    """

    object_type: str
    object_id: int
    aspect_type: str
    owner_id: int
    subscription_id: int
    event_time: int
    updates: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the event in its wire shape; ``updates`` is omitted when absent."""
        d: Dict[str, Any] = {
            "object_type": self.object_type,
            "object_id": self.object_id,
            "aspect_type": self.aspect_type,
            "owner_id": self.owner_id,
            "subscription_id": self.subscription_id,
            "event_time": self.event_time,
        }
        if self.updates is not None:
            d["updates"] = dict(self.updates)
        return d


@dataclass(frozen=True)
class WebhookSubscription:
    """
    Push subscription registered for the application.

    :param id: Subscription ID.
    :param application_id: Application ID.
    :param callback_url: URL receiving webhook events.
    :param created_at: Creation timestamp (ISO 8601).
    :param updated_at: Last update timestamp (ISO 8601).
    :param raw: The unmodified JSON payload.
    """

    id: int
    application_id: Optional[int] = None
    callback_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "WebhookSubscription":
        return cls(
            id=data["id"],
            application_id=data.get("application_id"),
            callback_url=data.get("callback_url"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            raw=dict(data),
        )
