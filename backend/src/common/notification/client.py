"""
Notification Client (공통 인프라)

멘토링 로그 단위의 메일 발송 포트.
발송은 fire-and-forget: 호출자는 결과를 기다리지 않으며, 실패는 로그로만 남는다.

사용 예시:
    from backend.src.common.notification.client import get_notifier

    notifier = get_notifier()
    notifier.send(mentoring_log_id, MailType.APPROVE_TO_CADET)
"""

import asyncio
import logging
from abc import ABC, abstractmethod

import httpx

from backend.src.common.config import MAIL_CONFIG
from backend.src.common.enums import MailType


logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """메일 발송 오류."""


class Notifier(ABC):
    """
    메일 발송 포트.

    ``send``는 백그라운드 태스크를 등록하고 즉시 반환한다.
    실제 전송은 하위 클래스의 ``deliver``가 담당한다.
    """

    def __init__(self) -> None:
        # 실행 중인 태스크가 GC되지 않도록 참조 유지
        self._pending: set[asyncio.Task] = set()

    def send(self, mentoring_log_id: str, mail_type: MailType) -> None:
        """메일 발송을 예약한다. 실행 중인 이벤트 루프 안에서 호출해야 한다."""
        task = asyncio.get_running_loop().create_task(self._deliver_safely(mentoring_log_id, mail_type))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver_safely(self, mentoring_log_id: str, mail_type: MailType) -> None:
        try:
            await self.deliver(mentoring_log_id, mail_type)
            logger.info(f"mail {mail_type} for mentoringLog {mentoring_log_id} sent")
        except Exception as e:
            logger.warning(f"mail {mail_type} for mentoringLog {mentoring_log_id} failed: {e}")

    @abstractmethod
    async def deliver(self, mentoring_log_id: str, mail_type: MailType) -> None:
        """실제 발송. 실패 시 예외를 던진다."""

    async def drain(self) -> None:
        """대기 중인 발송을 모두 끝까지 기다린다 (종료 시/테스트용)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


class LoggingNotifier(Notifier):
    """메일 대신 로그만 남기는 구현 (개발/테스트용). 발송 이력을 보관한다."""

    def __init__(self) -> None:
        super().__init__()
        self.sent: list[tuple[str, MailType]] = []

    async def deliver(self, mentoring_log_id: str, mail_type: MailType) -> None:
        self.sent.append((mentoring_log_id, mail_type))
        logger.info(f"[mail:log] {mail_type} -> mentoringLog {mentoring_log_id}")


class HttpMailNotifier(Notifier):
    """
    외부 메일 API 기반 구현.

    수신자 조회와 템플릿 렌더링은 메일 API가 mentoring_log_id로 처리한다.
    """

    def __init__(self, api_url: str | None = None, api_key: str | None = None, timeout: float | None = None) -> None:
        super().__init__()
        self.api_url = api_url or MAIL_CONFIG.get("api_url")
        self.api_key = api_key or MAIL_CONFIG.get("api_key")
        self.timeout = timeout or MAIL_CONFIG.get("timeout", 10.0)

        if not self.api_url:
            logger.warning("MAIL_API_URL이 설정되지 않았습니다. 메일 발송이 모두 실패합니다.")

    async def deliver(self, mentoring_log_id: str, mail_type: MailType) -> None:
        if not self.api_url:
            raise NotificationError("MAIL_API_URL이 설정되지 않았습니다.")

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {"mentoring_log_id": mentoring_log_id, "mail_type": mail_type.value}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.api_url, headers=headers, json=payload)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise NotificationError(f"메일 API 타임아웃 ({self.timeout}초): {e}") from e
        except httpx.HTTPStatusError as e:
            raise NotificationError(f"메일 API 오류 ({e.response.status_code}): {e}") from e


def get_notifier() -> Notifier:
    """MAIL_CONFIG의 provider에 맞는 Notifier를 생성한다."""
    if MAIL_CONFIG["provider"] == "http":
        return HttpMailNotifier()
    return LoggingNotifier()
