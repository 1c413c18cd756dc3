"""
Mentoring 도메인 Repository
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.src.common.enums import MentoringLogStatus
from backend.src.common.repositories.base_repository import BaseRepository, RepositoryError
from backend.src.mentoring.models import MentoringLog


logger = logging.getLogger(__name__)


class MentoringLogRepository(BaseRepository[MentoringLog]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(MentoringLog, session)

    async def get_with_relations(self, mentoring_log_id: str) -> MentoringLog | None:
        """멘토/카뎃/레포트를 eager-load하여 조회한다."""
        stmt = (
            select(self.model)
            .where(self.model.id == mentoring_log_id)
            .options(
                selectinload(self.model.mentor),
                selectinload(self.model.cadet),
                selectinload(self.model.report),
            )
        )
        try:
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error getting MentoringLog {mentoring_log_id} with relations: {e}")
            raise RepositoryError(f"Failed to get entity: {e}") from e

    async def list_by_mentor(self, mentor_id: str) -> Sequence[MentoringLog]:
        stmt = select(self.model).where(self.model.mentor_id == mentor_id).order_by(self.model.created_at.desc())
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_by_cadet(self, cadet_id: str) -> Sequence[MentoringLog]:
        stmt = select(self.model).where(self.model.cadet_id == cadet_id).order_by(self.model.created_at.desc())
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_done_meetings(
        self, mentor_id: str, exclude_id: str | None = None
    ) -> list[tuple[datetime, datetime]]:
        """
        멘토의 완료(done) 멘토링 미팅 시간 목록을 반환한다.

        Args:
            mentor_id: 멘토 PK
            exclude_id: 결과에서 제외할 멘토링 로그 PK (정산 대상 자신)

        Raises:
            RepositoryError: 조회 실패
        """
        stmt = select(self.model.meeting_start, self.model.meeting_end).where(
            self.model.mentor_id == mentor_id,
            self.model.status == MentoringLogStatus.DONE,
            self.model.meeting_start.is_not(None),
            self.model.meeting_end.is_not(None),
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        try:
            result = await self.session.execute(stmt)
            return [(start, end) for start, end in result.all()]
        except Exception as e:
            logger.error(f"Error listing done meetings for mentor {mentor_id}: {e}")
            raise RepositoryError(f"Failed to list done meetings: {e}") from e
