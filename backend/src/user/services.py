"""
User 도메인 Service

멘토/카뎃 계정 조회 및 가입 처리.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.exceptions import Conflict, NotFound
from backend.src.common.repositories.base_repository import RepositoryError
from backend.src.user.models import Cadet, Mentor
from backend.src.user.repositories import CadetRepository, MentorRepository


logger = logging.getLogger(__name__)


class UserService:
    """
    사용자 서비스.

    인증 계층이 넘겨준 intra_id를 멘토/카뎃 엔티티로 해석한다.
    """

    def __init__(self, mentor_repo: MentorRepository, cadet_repo: CadetRepository) -> None:
        self.mentor_repo = mentor_repo
        self.cadet_repo = cadet_repo

    @classmethod
    def from_session(cls, session: AsyncSession) -> "UserService":
        """AsyncSession으로부터 서비스 인스턴스를 생성한다."""
        return cls(mentor_repo=MentorRepository(session), cadet_repo=CadetRepository(session))

    async def get_mentor(self, intra_id: str) -> Mentor:
        """
        인트라 ID로 멘토를 조회한다.

        Raises:
            NotFound: 멘토가 존재하지 않는 경우
            Conflict: 조회 실패
        """
        try:
            mentor = await self.mentor_repo.get_by_intra_id(intra_id)
        except RepositoryError as e:
            raise Conflict("멘토 정보를 찾는 중 오류가 발생했습니다") from e
        if not mentor:
            raise NotFound(f"Mentor(intra_id={intra_id}) 이(가) 존재하지 않습니다.")
        return mentor

    async def get_cadet(self, intra_id: str) -> Cadet:
        """
        인트라 ID로 카뎃을 조회한다.

        Raises:
            NotFound: 카뎃이 존재하지 않는 경우
            Conflict: 조회 실패
        """
        try:
            cadet = await self.cadet_repo.get_by_intra_id(intra_id)
        except RepositoryError as e:
            raise Conflict("카뎃 정보를 찾는 중 오류가 발생했습니다") from e
        if not cadet:
            raise NotFound(f"Cadet(intra_id={intra_id}) 이(가) 존재하지 않습니다.")
        return cadet

    async def join_mentor(self, intra_id: str, name: str | None = None, email: str | None = None) -> Mentor:
        """멘토를 등록한다. 이미 있으면 기존 계정을 반환한다."""
        existing = await self.mentor_repo.get_by_intra_id(intra_id)
        if existing:
            return existing
        mentor = await self.mentor_repo.create({"intra_id": intra_id, "name": name, "email": email})
        logger.info(f"멘토 가입: {intra_id}")
        return mentor

    async def join_cadet(
        self, intra_id: str, name: str | None = None, email: str | None = None, is_common: bool = True
    ) -> Cadet:
        """카뎃을 등록한다. 이미 있으면 기존 계정을 반환한다."""
        existing = await self.cadet_repo.get_by_intra_id(intra_id)
        if existing:
            return existing
        cadet = await self.cadet_repo.create(
            {"intra_id": intra_id, "name": name, "email": email, "is_common": is_common}
        )
        logger.info(f"카뎃 가입: {intra_id}")
        return cadet
