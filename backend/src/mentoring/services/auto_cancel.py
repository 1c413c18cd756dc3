"""
Auto-Cancel Scheduler

카뎃이 신청한 멘토링에 멘토가 기한 내 응답하지 않으면 자동취소한다.

- 멘토링 로그 ID 하나당 최대 1개의 대기 태스크 (재등록 시 기존 태스크 취소 후 교체)
- 발화 시점에 DB에서 상태를 새로 읽어 'waiting'일 때만 취소 (stale 태스크 방어)
- 발화 콜백 안의 모든 오류는 로그로만 남고 밖으로 전파되지 않는다

사용 예시:
    scheduler = AutoCancelScheduler(AsyncDatabaseEngine().get_session, notifier)
    scheduler.schedule_auto_cancel(mentoring_log_id, MENTORING_CONFIG["auto_cancel_delay_ms"])
"""

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.enums import MailType, MentoringLogStatus
from backend.src.common.notification.client import Notifier
from backend.src.mentoring.repositories import MentoringLogRepository
from backend.src.mentoring.state import can_transition


logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

_MS_PER_HOUR = 3_600_000


class AutoCancelScheduler:
    """
    멘토링 로그별 지연 취소 태스크 레지스트리.

    레지스트리 변경(등록/교체/삭제)은 await 없이 동기적으로 수행되므로
    같은 이벤트 루프 위에서는 원자적이다.
    """

    def __init__(self, session_factory: SessionFactory, notifier: Notifier) -> None:
        self._session_factory = session_factory
        self._notifier = notifier
        self._tasks: dict[str, asyncio.Task] = {}

    def schedule_auto_cancel(self, mentoring_log_id: str, delay_ms: int) -> asyncio.Task:
        """
        ``delay_ms`` 후 자동취소 태스크를 등록한다.

        같은 ID의 태스크가 이미 있으면 취소하고 새 태스크로 교체한다.

        Returns:
            등록된 asyncio.Task

        Raises:
            ValueError: ID가 비었거나 지연 시간이 음수인 경우
        """
        if not mentoring_log_id:
            raise ValueError("mentoring_log_id is required")
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0 (got {delay_ms})")

        self._remove(mentoring_log_id)

        task = asyncio.get_running_loop().create_task(
            self._run(mentoring_log_id, delay_ms), name=f"auto-cancel:{mentoring_log_id}"
        )
        self._tasks[mentoring_log_id] = task
        logger.info(f"autoCancel mentoringLog after {delay_ms / _MS_PER_HOUR}hours, {mentoring_log_id} added!")
        return task

    def cancel_auto_cancel(self, mentoring_log_id: str) -> bool:
        """대기 중인 태스크를 취소한다. 없으면 아무 일도 하지 않는다."""
        return self._remove(mentoring_log_id)

    def list_tasks(self) -> list[str]:
        """대기 중인 태스크의 키 목록 (진단용)."""
        keys = list(self._tasks)
        for key in keys:
            logger.info(f"autoCancel: {key}")
        return keys

    async def shutdown(self) -> None:
        """대기 중인 모든 태스크를 취소한다 (애플리케이션 종료 시)."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(f"autoCancel scheduler stopped ({len(tasks)} pending tasks cancelled)")

    def _remove(self, mentoring_log_id: str) -> bool:
        task = self._tasks.pop(mentoring_log_id, None)
        if task is None:
            return False
        # 발화 중인 자기 자신은 취소하지 않는다
        if task is not asyncio.current_task():
            task.cancel()
        logger.info(f"autoCancel mentoringLog {mentoring_log_id} deleted!")
        return True

    async def _run(self, mentoring_log_id: str, delay_ms: int) -> None:
        await asyncio.sleep(delay_ms / 1000)
        try:
            await self._fire(mentoring_log_id)
        except Exception as e:
            logger.error(f"autoCancel mentoringLog {mentoring_log_id} failed: {e}")
        finally:
            # 교체된 새 태스크는 지우지 않는다
            if self._tasks.get(mentoring_log_id) is asyncio.current_task():
                self._remove(mentoring_log_id)

    async def _fire(self, mentoring_log_id: str) -> None:
        async with self._session_factory() as session:
            repository = MentoringLogRepository(session)
            mentoring_log = await repository.get(mentoring_log_id)

            if mentoring_log is None:
                logger.warning(f"autoCancel mentoringLog {mentoring_log_id}: 멘토링 로그가 존재하지 않습니다")
                return

            if not can_transition(mentoring_log.status, MentoringLogStatus.AUTO_CANCELLED):
                logger.info(
                    f"autoCancel mentoringLog {mentoring_log_id}: 상태가 'waiting'이 아닙니다 ({mentoring_log.status})"
                )
                return

            mentoring_log.status = MentoringLogStatus.AUTO_CANCELLED
            await repository.save(mentoring_log)

        logger.info(f"autoCancel mentoringLog {mentoring_log_id} status waiting -> auto-cancelled")
        self._notifier.send(mentoring_log_id, MailType.CANCEL_TO_CADET)
