"""
AutoCancelScheduler 테스트

지연 시간은 0ms 또는 아주 길게 주고, 태스크를 직접 await 하여 발화 결과를 확인한다.
"""

import asyncio

import pytest

from backend.src.common.enums import MailType, MentoringLogStatus
from backend.src.mentoring.models import MentoringLog


async def _status(session_factory, mentoring_log_id: str) -> MentoringLogStatus:
    async with session_factory() as s:
        log = await s.get(MentoringLog, mentoring_log_id)
        return log.status


class TestAutoCancelFire:
    async def test_waiting_log_is_auto_cancelled(self, scheduler, session_factory, notifier, make_log):
        """발화 시 waiting이면 auto-cancelled로 바꾸고 카뎃에게 취소 메일을 보낸다."""
        log = await make_log(MentoringLogStatus.WAITING)

        task = scheduler.schedule_auto_cancel(log.id, 0)
        await task
        await notifier.drain()

        assert await _status(session_factory, log.id) == MentoringLogStatus.AUTO_CANCELLED
        assert notifier.sent == [(log.id, MailType.CANCEL_TO_CADET)]
        assert scheduler.list_tasks() == []

    @pytest.mark.parametrize(
        "status",
        [MentoringLogStatus.CONFIRMED, MentoringLogStatus.REJECTED, MentoringLogStatus.DONE],
    )
    async def test_stale_task_is_noop(self, scheduler, session_factory, notifier, make_log, status):
        """이미 응답된 로그에 대해 발화하면 아무것도 바꾸지 않는다."""
        log = await make_log(status)

        await scheduler.schedule_auto_cancel(log.id, 0)
        await notifier.drain()

        assert await _status(session_factory, log.id) == status
        assert notifier.sent == []

    async def test_missing_log_is_noop(self, scheduler, notifier):
        await scheduler.schedule_auto_cancel("does-not-exist", 0)
        await notifier.drain()

        assert notifier.sent == []
        assert scheduler.list_tasks() == []

    async def test_fire_error_is_swallowed(self, session_factory, notifier, make_log):
        """세션 팩토리가 실패해도 태스크 밖으로 예외가 나오지 않는다."""
        from backend.src.mentoring.services.auto_cancel import AutoCancelScheduler

        def broken_factory():
            raise RuntimeError("db down")

        scheduler = AutoCancelScheduler(broken_factory, notifier)
        log = await make_log(MentoringLogStatus.WAITING)

        await scheduler.schedule_auto_cancel(log.id, 0)

        assert await _status(session_factory, log.id) == MentoringLogStatus.WAITING
        assert scheduler.list_tasks() == []


class TestAutoCancelRegistry:
    async def test_cancel_before_fire(self, scheduler, session_factory, make_log):
        log = await make_log(MentoringLogStatus.WAITING)
        task = scheduler.schedule_auto_cancel(log.id, 60_000)

        assert scheduler.cancel_auto_cancel(log.id) is True
        with pytest.raises(asyncio.CancelledError):
            await task

        assert await _status(session_factory, log.id) == MentoringLogStatus.WAITING
        assert scheduler.list_tasks() == []

    async def test_cancel_unknown_is_noop(self, scheduler):
        assert scheduler.cancel_auto_cancel("unknown") is False

    async def test_reschedule_replaces_previous_task(self, scheduler, make_log):
        """같은 ID로 다시 등록하면 기존 태스크는 취소되고 키는 하나만 남는다."""
        log = await make_log(MentoringLogStatus.WAITING)
        first = scheduler.schedule_auto_cancel(log.id, 60_000)
        second = scheduler.schedule_auto_cancel(log.id, 60_000)
        await asyncio.sleep(0.01)

        assert first.cancelled()
        assert not second.done()
        assert scheduler.list_tasks() == [log.id]

    async def test_replaced_task_does_not_remove_new_one(self, scheduler, session_factory, make_log):
        log = await make_log(MentoringLogStatus.WAITING)
        first = scheduler.schedule_auto_cancel(log.id, 60_000)
        second = scheduler.schedule_auto_cancel(log.id, 0)

        await second
        assert first.cancelled()
        assert await _status(session_factory, log.id) == MentoringLogStatus.AUTO_CANCELLED
        assert scheduler.list_tasks() == []

    async def test_list_tasks(self, scheduler):
        scheduler.schedule_auto_cancel("log-a", 60_000)
        scheduler.schedule_auto_cancel("log-b", 60_000)

        assert sorted(scheduler.list_tasks()) == ["log-a", "log-b"]

    async def test_shutdown_cancels_everything(self, scheduler):
        task = scheduler.schedule_auto_cancel("log-a", 60_000)

        await scheduler.shutdown()

        assert task.cancelled()
        assert scheduler.list_tasks() == []

    @pytest.mark.parametrize("mentoring_log_id, delay_ms", [("", 1000), ("log-a", -1)])
    async def test_invalid_arguments(self, scheduler, mentoring_log_id, delay_ms):
        with pytest.raises(ValueError):
            scheduler.schedule_auto_cancel(mentoring_log_id, delay_ms)
