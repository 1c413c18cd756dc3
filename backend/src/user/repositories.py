"""
User 도메인 Repositories

멘토/카뎃 계정 데이터 접근 계층.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.repositories.base_repository import BaseRepository, RepositoryError
from backend.src.user.models import Cadet, Mentor


logger = logging.getLogger(__name__)


class _IntraIdLookupMixin:
    async def get_by_intra_id(self, intra_id: str):
        """
        인트라 ID로 계정을 조회한다.

        Returns:
            계정 인스턴스 또는 None

        Raises:
            RepositoryError: 조회 실패
        """
        stmt = select(self.model).where(self.model.intra_id == intra_id)
        try:
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error getting {self.model.__name__} by intra_id {intra_id}: {e}")
            raise RepositoryError(f"Failed to get entity: {e}") from e


# ============================================================
# Mentor Repository
# ============================================================
class MentorRepository(_IntraIdLookupMixin, BaseRepository[Mentor]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Mentor, session)


# ============================================================
# Cadet Repository
# ============================================================
class CadetRepository(_IntraIdLookupMixin, BaseRepository[Cadet]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Cadet, session)
