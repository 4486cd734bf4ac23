"""
app/notifications/webhook.py

Operator notification sinks.

The only production transport is a chat webhook (Discord-compatible: a JSON
POST of ``{"content": text}``). Delivery is best-effort; callers that must
not fail on a notification catch :class:`NotificationDeliveryError`.
"""

from __future__ import annotations

import logging
from typing import Protocol

import requests

from app.config import WebhookSettings

logger = logging.getLogger(__name__)

# Discord rejects message content longer than this.
MAX_CONTENT_LENGTH = 2000


class NotificationDeliveryError(RuntimeError):
    """
    Raised when the webhook is unreachable or answers with a non-2xx status.
    """


class NotificationSink(Protocol):
    def send(self, text: str) -> None:
        ...


class NoOpNotificationSink:
    def send(self, text: str) -> None:
        return None


class WebhookNotificationSink:
    """
    Posts text messages to a chat webhook.

    A sink without a URL is a no-op that logs a warning on each send.
    """

    def __init__(
        self,
        *,
        settings: WebhookSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._url = settings.url
        self._timeout_seconds = settings.timeout_seconds
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self._url)

    def send(self, text: str) -> None:
        if not self._url:
            logger.warning("Webhook URL is not configured; notification dropped")
            return

        content = text if len(text) <= MAX_CONTENT_LENGTH else text[: MAX_CONTENT_LENGTH - 1] + "…"
        try:
            response = self._session.post(
                self._url,
                json={"content": content},
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise NotificationDeliveryError(f"Webhook request failed: {exc}") from exc

        if not response.ok:
            raise NotificationDeliveryError(
                f"Webhook responded {response.status_code} {response.reason}: "
                f"{response.text[:200]}"
            )
        logger.debug("Webhook notification delivered status=%s", response.status_code)
