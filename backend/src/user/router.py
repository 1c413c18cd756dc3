"""
User 도메인 API 라우터

인증을 마친 멘토/카뎃의 최초 가입(계정 레코드 생성) 엔드포인트.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.database.connection import AsyncDatabaseEngine
from backend.src.common.enums import UserRole
from backend.src.common.middlewares.auth import get_current_intra_id, require_role
from backend.src.user.schemas import JoinRequest, UserResponse
from backend.src.user.services import UserService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["user"])


# ============================================================
# Dependencies
# ============================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI Depends용 세션 제공."""
    db_engine = AsyncDatabaseEngine()
    async with db_engine.get_session() as session:
        yield session


async def get_user_service(session: AsyncSession = Depends(get_session)) -> UserService:
    """UserService 팩토리."""
    return UserService.from_session(session)


# ============================================================
# Endpoints
# ============================================================
@router.post(
    "/mentors/join",
    response_model=UserResponse,
    status_code=201,
    summary="멘토 가입",
    dependencies=[Depends(require_role(UserRole.MENTOR))],
)
async def join_mentor(
    body: JoinRequest,
    intra_id: str = Depends(get_current_intra_id),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    mentor = await service.join_mentor(intra_id, name=body.name, email=body.email)
    return UserResponse(id=mentor.id, intra_id=mentor.intra_id, name=mentor.name, role=UserRole.MENTOR)


@router.post(
    "/cadets/join",
    response_model=UserResponse,
    status_code=201,
    summary="카뎃 가입",
    dependencies=[Depends(require_role(UserRole.CADET))],
)
async def join_cadet(
    body: JoinRequest,
    intra_id: str = Depends(get_current_intra_id),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    cadet = await service.join_cadet(intra_id, name=body.name, email=body.email, is_common=body.is_common)
    return UserResponse(id=cadet.id, intra_id=cadet.intra_id, name=cadet.name, role=UserRole.CADET)
