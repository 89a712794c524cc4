# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Push subscription operations namespace."""

from __future__ import annotations

from typing import Any, Mapping, Optional, TYPE_CHECKING

from ..core._transport import RequestConfig, ResponseFormat
from ..core.cancellation import CancellationToken
from ..models.webhook import WebhookEvent, WebhookSubscription
from ..webhooks import parse_webhook_event, validate_webhook_verification

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["WebhookOperations"]


class WebhookOperations:
    """Namespace for push subscription management.

    Accessed via ``client.webhooks``. Subscription endpoints authenticate
    with the application's client ID and secret rather than an athlete token,
    so no tokens need to be set on the client.

    :param client: The parent :class:`~strava_client.client.StravaClient` instance.
    :type client: ~strava_client.client.StravaClient

    Example::

        existing = client.webhooks.get_subscription()
        if existing is None:
            client.webhooks.create_subscription("https://example.com/strava/webhook", "my-verify-token")
    """

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    def _credentials(self) -> dict:
        return {"client_id": self._client.client_id, "client_secret": self._client.client_secret}

    def create_subscription(
        self,
        callback_url: str,
        verify_token: str,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> WebhookSubscription:
        """Create the application's push subscription.

        Strava validates ``callback_url`` synchronously with a GET request that
        must be answered using :meth:`validate_verification`.

        :param callback_url: Publicly reachable URL receiving events.
        :type callback_url: :class:`str`
        :param verify_token: Token echoed back in the validation request.
        :type verify_token: :class:`str`
        :return: The created subscription.
        :rtype: ~strava_client.models.webhook.WebhookSubscription
        """
        form = dict(self._credentials(), callback_url=callback_url, verify_token=verify_token)
        data = self._client._execute(
            RequestConfig(
                "POST",
                "/push_subscriptions",
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                skip_auth=True,
                context="Create Webhook Subscription",
                cancellation=cancellation,
            )
        )
        return WebhookSubscription.from_response(data)

    def get_subscription(
        self, *, cancellation: Optional[CancellationToken] = None
    ) -> Optional[WebhookSubscription]:
        """Return the application's subscription, or ``None`` if there is none."""
        data = self._client._execute(
            RequestConfig(
                "GET",
                "/push_subscriptions",
                params=self._credentials(),
                skip_auth=True,
                context="Get Webhook Subscription",
                cancellation=cancellation,
            )
        )
        if not data:
            return None
        return WebhookSubscription.from_response(data[0])

    def delete_subscription(
        self, subscription_id: int, *, cancellation: Optional[CancellationToken] = None
    ) -> None:
        """Delete a push subscription.

        :param subscription_id: Subscription ID.
        :type subscription_id: :class:`int`
        """
        self._client._execute(
            RequestConfig(
                "POST",
                f"/push_subscriptions/{subscription_id}",
                params=self._credentials(),
                headers={"X-HTTP-Method-Override": "DELETE"},
                skip_auth=True,
                context="Delete Webhook Subscription",
                response_format=ResponseFormat.NONE,
                cancellation=cancellation,
            )
        )

    def validate_verification(self, params: Mapping[str, Any], verify_token: str) -> Optional[str]:
        """See :func:`strava_client.webhooks.validate_webhook_verification`."""
        return validate_webhook_verification(params, verify_token)

    def parse_event(self, payload: Any) -> WebhookEvent:
        """See :func:`strava_client.webhooks.parse_webhook_event`."""
        return parse_webhook_event(payload)
