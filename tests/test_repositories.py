"""
BaseRepository 통합 테스트 (SQLite)
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.enums import MentoringLogStatus
from backend.src.common.repositories.base_repository import DuplicateEntity, EntityNotFound, StaleEntity
from backend.src.mentoring.models import MentoringLog
from backend.src.mentoring.repositories import MentoringLogRepository
from backend.src.user.models import Mentor
from backend.src.user.repositories import MentorRepository


class TestBaseRepository:
    async def test_create_duplicate_intra_id(self, session: AsyncSession, mentor: Mentor):
        repo = MentorRepository(session)

        with pytest.raises(DuplicateEntity):
            await repo.create({"intra_id": mentor.intra_id})

    async def test_find_many(self, session: AsyncSession, make_log):
        await make_log(MentoringLogStatus.WAITING)
        await make_log(MentoringLogStatus.DONE)

        repo = MentoringLogRepository(session)
        waiting = await repo.find_many(status=MentoringLogStatus.WAITING)

        assert len(waiting) == 1
        with pytest.raises(ValueError):
            await repo.find_many(unknown_column=1)

    async def test_update_missing_entity(self, session: AsyncSession):
        repo = MentoringLogRepository(session)

        with pytest.raises(EntityNotFound):
            await repo.update("unknown-id", {"topic": "x"})

    async def test_update_bumps_version(self, session: AsyncSession, make_log):
        log = await make_log(MentoringLogStatus.WAITING)
        repo = MentoringLogRepository(session)

        updated = await repo.update(log.id, {"topic": "새 주제"})

        assert updated.topic == "새 주제"
        assert updated.version == 2

    async def test_stale_write(self, session_maker, make_log):
        """같은 로그를 두 세션이 읽고 한쪽이 먼저 커밋하면 다른 쪽 저장은 StaleEntity."""
        log = await make_log(MentoringLogStatus.WAITING)

        async with session_maker() as first, session_maker() as second:
            a = await first.get(MentoringLog, log.id)
            b = await second.get(MentoringLog, log.id)

            a.status = MentoringLogStatus.REJECTED
            await MentoringLogRepository(first).save(a)
            await first.commit()

            b.status = MentoringLogStatus.CONFIRMED
            with pytest.raises(StaleEntity):
                await MentoringLogRepository(second).save(b)
            await second.rollback()

    async def test_list_done_meetings_excludes_self(self, session: AsyncSession, make_log, mentor: Mentor):
        from datetime import datetime

        window = (datetime(2026, 10, 20, 10, 0), datetime(2026, 10, 20, 12, 0))
        target = await make_log(MentoringLogStatus.DONE, meeting_at=window)
        await make_log(MentoringLogStatus.DONE, meeting_at=window)
        await make_log(MentoringLogStatus.CONFIRMED, meeting_at=window)

        repo = MentoringLogRepository(session)
        meetings = await repo.list_done_meetings(mentor.id, exclude_id=target.id)

        assert meetings == [window]

    async def test_get_all_ordering(self, session: AsyncSession, mentor: Mentor, other_mentor: Mentor):
        repo = MentorRepository(session)

        mentors = await repo.get_all(order_by="intra_id", ascending=False)

        assert [m.intra_id for m in mentors] == ["mentor02", "mentor01"]
