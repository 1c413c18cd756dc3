"""
Mentoring 도메인 API 라우터

카뎃 신청, 멘토 일정 확정/거절, 진행 완료 처리, 자동취소 진단 엔드포인트.
서비스 예외(ServiceError)는 backend.main의 예외 핸들러가 HTTP 응답으로 변환한다.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.database.connection import AsyncDatabaseEngine
from backend.src.common.dependencies import get_notifier, get_scheduler
from backend.src.common.enums import UserRole
from backend.src.common.middlewares.auth import get_current_intra_id, require_role
from backend.src.common.notification.client import Notifier
from backend.src.mentoring.schemas import MeetingUpdateRequest, MentoringApplyRequest, MentoringLogResponse
from backend.src.mentoring.services.auto_cancel import AutoCancelScheduler
from backend.src.mentoring.services.mentoring_service import MentoringService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mentorings", tags=["mentoring"])


# ============================================================
# Dependencies
# ============================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI Depends용 세션 제공."""
    db_engine = AsyncDatabaseEngine()
    async with db_engine.get_session() as session:
        yield session


async def get_mentoring_service(
    session: AsyncSession = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
    scheduler: AutoCancelScheduler = Depends(get_scheduler),
) -> MentoringService:
    """MentoringService 팩토리."""
    return MentoringService.from_session(session, notifier, scheduler)


# ============================================================
# Cadet
# ============================================================
@router.post(
    "/apply/{mentor_intra_id}",
    response_model=MentoringLogResponse,
    status_code=201,
    summary="멘토링 신청",
    dependencies=[Depends(require_role(UserRole.CADET))],
)
async def apply_mentoring(
    mentor_intra_id: str,
    body: MentoringApplyRequest,
    cadet_intra_id: str = Depends(get_current_intra_id),
    service: MentoringService = Depends(get_mentoring_service),
) -> MentoringLogResponse:
    """waiting 상태의 멘토링 로그를 만들고 자동취소 타이머를 등록한다."""
    mentoring_log = await service.apply(
        cadet_intra_id=cadet_intra_id,
        mentor_intra_id=mentor_intra_id,
        topic=body.topic,
        content=body.content,
        request_times=[t.as_tuple() for t in body.request_times],
    )
    return MentoringLogResponse.model_validate(mentoring_log)


@router.get(
    "/cadet",
    response_model=list[MentoringLogResponse],
    summary="내 멘토링 신청 목록",
    dependencies=[Depends(require_role(UserRole.CADET))],
)
async def get_cadet_mentorings(
    cadet_intra_id: str = Depends(get_current_intra_id),
    service: MentoringService = Depends(get_mentoring_service),
) -> list[MentoringLogResponse]:
    logs = await service.list_cadet_logs(cadet_intra_id)
    return [MentoringLogResponse.model_validate(log) for log in logs]


# ============================================================
# Mentor
# ============================================================
@router.patch(
    "",
    response_model=MentoringLogResponse,
    summary="멘토링 일정 확정/거절",
    dependencies=[Depends(require_role(UserRole.MENTOR))],
)
async def set_meeting_at(
    body: MeetingUpdateRequest,
    mentor_intra_id: str = Depends(get_current_intra_id),
    service: MentoringService = Depends(get_mentoring_service),
) -> MentoringLogResponse:
    mentoring_log = await service.set_meeting_at(
        mentoring_log_id=body.mentoring_log_id,
        mentor_intra_id=mentor_intra_id,
        status=body.status,
        meeting_at=body.meeting_at.as_tuple() if body.meeting_at else None,
        reject_message=body.reject_message,
    )
    return MentoringLogResponse.model_validate(mentoring_log)


@router.get(
    "/mentor",
    response_model=list[MentoringLogResponse],
    summary="내게 온 멘토링 목록",
    dependencies=[Depends(require_role(UserRole.MENTOR))],
)
async def get_mentor_mentorings(
    mentor_intra_id: str = Depends(get_current_intra_id),
    service: MentoringService = Depends(get_mentoring_service),
) -> list[MentoringLogResponse]:
    logs = await service.list_mentor_logs(mentor_intra_id)
    return [MentoringLogResponse.model_validate(log) for log in logs]


# ============================================================
# Bocal (운영진)
# ============================================================
@router.post(
    "/{mentoring_log_id}/done",
    response_model=MentoringLogResponse,
    summary="멘토링 진행 완료 처리",
    dependencies=[Depends(require_role(UserRole.BOCAL))],
)
async def complete_mentoring(
    mentoring_log_id: str, service: MentoringService = Depends(get_mentoring_service)
) -> MentoringLogResponse:
    mentoring_log = await service.complete(mentoring_log_id)
    return MentoringLogResponse.model_validate(mentoring_log)


@router.get(
    "/auto-cancel",
    summary="대기 중인 자동취소 목록 (진단용)",
    dependencies=[Depends(require_role(UserRole.BOCAL))],
)
async def get_auto_cancel_tasks(scheduler: AutoCancelScheduler = Depends(get_scheduler)) -> list[str]:
    return scheduler.list_tasks()


@router.get("/{mentoring_log_id}", response_model=MentoringLogResponse, summary="멘토링 로그 조회")
async def get_mentoring(
    mentoring_log_id: str,
    _: str = Depends(get_current_intra_id),
    service: MentoringService = Depends(get_mentoring_service),
) -> MentoringLogResponse:
    mentoring_log = await service.get_log(mentoring_log_id)
    return MentoringLogResponse.model_validate(mentoring_log)
