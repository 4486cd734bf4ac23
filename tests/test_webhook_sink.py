"""
tests/test_webhook_sink.py

Pytest unit tests for WebhookNotificationSink. The HTTP session is mocked.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from app.config import WebhookSettings
from app.notifications import NotificationDeliveryError, WebhookNotificationSink
from app.notifications.webhook import MAX_CONTENT_LENGTH

URL = "https://discord.com/api/webhooks/123/abc"


@pytest.fixture()
def session() -> MagicMock:
    mock = MagicMock(spec=requests.Session)
    mock.post.return_value = MagicMock(ok=True, status_code=204)
    return mock


class TestWebhookNotificationSink:
    def test_posts_content_payload(self, session: MagicMock) -> None:
        sink = WebhookNotificationSink(
            settings=WebhookSettings(url=URL, timeout_seconds=5.0),
            session=session,
        )

        sink.send("hello")

        session.post.assert_called_once_with(URL, json={"content": "hello"}, timeout=5.0)

    def test_without_url_nothing_is_sent(self, session: MagicMock) -> None:
        sink = WebhookNotificationSink(settings=WebhookSettings(url=None), session=session)

        sink.send("hello")

        assert sink.is_configured is False
        session.post.assert_not_called()

    def test_non_2xx_raises(self, session: MagicMock) -> None:
        session.post.return_value = MagicMock(
            ok=False, status_code=500, reason="Internal Server Error", text="boom"
        )
        sink = WebhookNotificationSink(settings=WebhookSettings(url=URL), session=session)

        with pytest.raises(NotificationDeliveryError, match="500"):
            sink.send("hello")

    def test_transport_error_raises(self, session: MagicMock) -> None:
        session.post.side_effect = requests.ConnectionError("unreachable")
        sink = WebhookNotificationSink(settings=WebhookSettings(url=URL), session=session)

        with pytest.raises(NotificationDeliveryError):
            sink.send("hello")

    def test_long_content_is_truncated(self, session: MagicMock) -> None:
        sink = WebhookNotificationSink(settings=WebhookSettings(url=URL), session=session)

        sink.send("x" * (MAX_CONTENT_LENGTH + 50))

        content = session.post.call_args.kwargs["json"]["content"]
        assert len(content) == MAX_CONTENT_LENGTH
