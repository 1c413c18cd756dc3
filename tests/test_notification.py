"""
메일 발송 포트 테스트

외부 메일 API 호출은 httpx.AsyncClient.post를 AsyncMock으로 대체해 검증.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from backend.src.common.config import MAIL_CONFIG
from backend.src.common.enums import MailType
from backend.src.common.notification.client import (
    HttpMailNotifier,
    LoggingNotifier,
    NotificationError,
    Notifier,
    get_notifier,
)


class _BrokenNotifier(Notifier):
    async def deliver(self, mentoring_log_id, mail_type):
        raise RuntimeError("smtp down")


class TestNotifier:
    async def test_send_is_fire_and_forget(self):
        notifier = LoggingNotifier()

        notifier.send("log-1", MailType.RESERVATION)
        notifier.send("log-1", MailType.APPROVE_TO_CADET)
        await notifier.drain()

        assert notifier.sent == [("log-1", MailType.RESERVATION), ("log-1", MailType.APPROVE_TO_CADET)]

    async def test_delivery_failure_is_only_logged(self, caplog):
        notifier = _BrokenNotifier()

        notifier.send("log-1", MailType.CANCEL_TO_CADET)
        await notifier.drain()

        assert "smtp down" in caplog.text

    def test_get_notifier_by_provider(self):
        with patch.dict(MAIL_CONFIG, {"provider": "http", "api_url": "http://mail.test/send"}):
            assert isinstance(get_notifier(), HttpMailNotifier)
        with patch.dict(MAIL_CONFIG, {"provider": "log"}):
            assert isinstance(get_notifier(), LoggingNotifier)


class TestHttpMailNotifier:
    async def test_posts_mail_request(self):
        response = MagicMock()
        notifier = HttpMailNotifier(api_url="http://mail.test/send", api_key="secret")

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=response) as mock_post:
            await notifier.deliver("log-1", MailType.APPROVE_TO_CADET)

        mock_post.assert_awaited_once()
        kwargs = mock_post.call_args.kwargs
        assert kwargs["json"] == {"mentoring_log_id": "log-1", "mail_type": "ApproveToCadet"}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        response.raise_for_status.assert_called_once()

    async def test_timeout_raises_notification_error(self):
        notifier = HttpMailNotifier(api_url="http://mail.test/send")

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock, side_effect=httpx.TimeoutException("slow")):
            with pytest.raises(NotificationError):
                await notifier.deliver("log-1", MailType.RESERVATION)

    async def test_http_error_raises_notification_error(self):
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "server error", request=MagicMock(), response=MagicMock(status_code=500)
        )
        notifier = HttpMailNotifier(api_url="http://mail.test/send")

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(NotificationError):
                await notifier.deliver("log-1", MailType.RESERVATION)

    async def test_missing_api_url(self):
        with patch.dict(MAIL_CONFIG, {"api_url": None}):
            notifier = HttpMailNotifier()

        with pytest.raises(NotificationError):
            await notifier.deliver("log-1", MailType.RESERVATION)
