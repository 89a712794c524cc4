# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Webhook helpers for applications receiving Strava push events.

Both functions are pure: they perform no I/O and hold no state, so they can be
called directly from any web framework's request handler.
"""

from __future__ import annotations

import hmac
from typing import Any, Mapping, Optional

from .core.errors import StravaValidationError
from .models.webhook import WEBHOOK_ASPECT_TYPES, WEBHOOK_OBJECT_TYPES, WebhookEvent

__all__ = ["validate_webhook_verification", "parse_webhook_event"]

_INVALID_PAYLOAD = "Invalid webhook event payload"
_INT_FIELDS = ("object_id", "owner_id", "subscription_id", "event_time")


def validate_webhook_verification(params: Mapping[str, Any], verify_token: str) -> Optional[str]:
    """
    Answer the subscription validation GET that Strava sends to a callback URL.

    :param params: Query parameters of the validation request
        (``hub.mode``, ``hub.verify_token``, ``hub.challenge``).
    :type params: ~typing.Mapping
    :param verify_token: The token supplied when the subscription was created.
    :type verify_token: str
    :return: The ``hub.challenge`` value to echo back as ``{"hub.challenge": ...}``,
        or ``None`` when the request is not a valid subscription challenge.
    :rtype: str or None

    Example::

        challenge = validate_webhook_verification(request.args, "my-verify-token")
        if challenge is None:
            return "Forbidden", 403
        return {"hub.challenge": challenge}
    """
    if not params or params.get("hub.mode") != "subscribe":
        return None
    token = params.get("hub.verify_token")
    challenge = params.get("hub.challenge")
    if not isinstance(token, str) or not isinstance(challenge, str) or not isinstance(verify_token, str):
        return None
    if not hmac.compare_digest(token.encode("utf-8"), verify_token.encode("utf-8")):
        return None
    return challenge


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_webhook_event(payload: Any) -> WebhookEvent:
    """
    Validate a webhook POST body and return it as a :class:`WebhookEvent`.

    :param payload: Decoded JSON body of the webhook request.
    :return: The validated event.
    :rtype: ~strava_client.models.webhook.WebhookEvent
    :raises StravaValidationError: If any required field is missing or of the
        wrong type, an enumerated field holds an unknown value, or ``updates``
        is present but not a mapping.
    """
    if not isinstance(payload, Mapping):
        raise StravaValidationError(f"{_INVALID_PAYLOAD}: expected a JSON object")

    object_type = payload.get("object_type")
    if object_type not in WEBHOOK_OBJECT_TYPES:
        raise StravaValidationError(f"{_INVALID_PAYLOAD}: unknown object_type {object_type!r}")
    aspect_type = payload.get("aspect_type")
    if aspect_type not in WEBHOOK_ASPECT_TYPES:
        raise StravaValidationError(f"{_INVALID_PAYLOAD}: unknown aspect_type {aspect_type!r}")

    for name in _INT_FIELDS:
        if not _is_int(payload.get(name)):
            raise StravaValidationError(f"{_INVALID_PAYLOAD}: {name} must be an integer")

    updates = payload.get("updates")
    if updates is not None and not isinstance(updates, Mapping):
        raise StravaValidationError(f"{_INVALID_PAYLOAD}: updates must be an object")

    return WebhookEvent(
        object_type=object_type,
        object_id=payload["object_id"],
        aspect_type=aspect_type,
        owner_id=payload["owner_id"],
        subscription_id=payload["subscription_id"],
        event_time=payload["event_time"],
        updates=dict(updates) if updates is not None else None,
    )
