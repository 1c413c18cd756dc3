"""
Report 도메인 Repository
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.src.common.enums import ReportStatus
from backend.src.common.repositories.base_repository import BaseRepository, RepositoryError
from backend.src.mentoring.models import MentoringLog
from backend.src.report.models import Report


logger = logging.getLogger(__name__)


class ReportRepository(BaseRepository[Report]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Report, session)

    async def get_with_relations(self, report_id: str) -> Report | None:
        """멘토링 로그/멘토/카뎃을 eager-load하여 조회한다."""
        stmt = (
            select(self.model)
            .where(self.model.id == report_id)
            .options(
                selectinload(self.model.mentoring_log),
                selectinload(self.model.mentor),
                selectinload(self.model.cadet),
            )
        )
        try:
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error getting Report {report_id} with relations: {e}")
            raise RepositoryError(f"Failed to get entity: {e}") from e

    async def list_submitted_between(self, since: datetime, until: datetime) -> Sequence[Report]:
        """
        미팅 시작 시각이 [since, until) 구간인 제출 완료 레포트를 조회한다.

        Raises:
            RepositoryError: 조회 실패
        """
        stmt = (
            select(self.model)
            .join(self.model.mentoring_log)
            .where(
                self.model.status == ReportStatus.SUBMITTED,
                MentoringLog.meeting_start >= since,
                MentoringLog.meeting_start < until,
                MentoringLog.meeting_end.is_not(None),
            )
            .options(
                selectinload(self.model.mentoring_log),
                selectinload(self.model.mentor),
                selectinload(self.model.cadet),
            )
            .order_by(MentoringLog.meeting_start)
        )
        try:
            result = await self.session.execute(stmt)
            return result.scalars().all()
        except Exception as e:
            logger.error(f"Error listing submitted Reports between {since} and {until}: {e}")
            raise RepositoryError(f"Failed to list submitted reports: {e}") from e
