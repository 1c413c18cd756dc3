"""
Report 도메인 API 라우터

레포트 생성/조회/수정/제출, 사진·서명 키 등록, 운영진 정산 내역 엔드포인트.
"""

import logging
from collections.abc import AsyncGenerator
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.database.connection import AsyncDatabaseEngine
from backend.src.common.dependencies import get_asset_storage
from backend.src.common.enums import UserRole
from backend.src.common.middlewares.auth import get_current_intra_id, require_role
from backend.src.common.storage.client import AssetStorage
from backend.src.report.schemas import (
    AssetUploadRequest,
    AssetUploadResponse,
    ReportCreateResponse,
    ReportResponse,
    ReportUpdateRequest,
    SettlementRow,
)
from backend.src.report.services import ReportService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["report"])


# ============================================================
# Dependencies
# ============================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI Depends용 세션 제공."""
    db_engine = AsyncDatabaseEngine()
    async with db_engine.get_session() as session:
        yield session


async def get_report_service(
    session: AsyncSession = Depends(get_session), storage: AssetStorage = Depends(get_asset_storage)
) -> ReportService:
    """ReportService 팩토리."""
    return ReportService.from_session(session, storage)


# ============================================================
# Endpoints
# ============================================================
@router.post("/{mentoring_log_id}", response_model=ReportCreateResponse, status_code=201, summary="레포트 생성")
async def create_report(
    mentoring_log_id: str,
    role: UserRole = Depends(require_role(UserRole.MENTOR, UserRole.BOCAL)),
    intra_id: str = Depends(get_current_intra_id),
    service: ReportService = Depends(get_report_service),
) -> ReportCreateResponse:
    """완료(done)된 멘토링 로그에 작성중 레포트를 만든다. 멘토는 자신의 로그에만 만들 수 있다."""
    mentor_intra_id = intra_id if role == UserRole.MENTOR else None
    report_id = await service.create_report(mentoring_log_id, mentor_intra_id=mentor_intra_id)
    return ReportCreateResponse(report_id=report_id)


@router.get(
    "/settlements",
    response_model=list[SettlementRow],
    summary="기간별 정산 내역 (운영진)",
    dependencies=[Depends(require_role(UserRole.BOCAL))],
)
async def get_settlements(
    start: date = Query(..., description="조회 시작일 (포함)"),
    end: date = Query(..., description="조회 종료일 (포함)"),
    service: ReportService = Depends(get_report_service),
) -> list[SettlementRow]:
    return await service.list_settlements(start, end)


@router.get("/{report_id}", response_model=ReportResponse, summary="레포트 조회")
async def get_report(
    report_id: str,
    _: str = Depends(get_current_intra_id),
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    report = await service.get_report(report_id)
    return ReportResponse.model_validate(report)


@router.patch(
    "/{report_id}",
    response_model=ReportResponse,
    summary="레포트 수정 (is_done=true면 제출)",
    dependencies=[Depends(require_role(UserRole.MENTOR))],
)
async def update_report(
    report_id: str,
    body: ReportUpdateRequest,
    mentor_intra_id: str = Depends(get_current_intra_id),
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    await service.update_report(report_id, mentor_intra_id, body)
    report = await service.get_report(report_id)
    return ReportResponse.model_validate(report)


@router.post(
    "/{report_id}/images",
    response_model=AssetUploadResponse,
    summary="사진 키 등록 (최대 2개)",
    dependencies=[Depends(require_role(UserRole.MENTOR))],
)
async def upload_image(
    report_id: str,
    body: AssetUploadRequest,
    mentor_intra_id: str = Depends(get_current_intra_id),
    service: ReportService = Depends(get_report_service),
) -> AssetUploadResponse:
    accepted = await service.upload_image(report_id, mentor_intra_id, body.key)
    return AssetUploadResponse(accepted=accepted)


@router.post(
    "/{report_id}/signature",
    response_model=AssetUploadResponse,
    summary="서명 키 등록 (최초 1회)",
    dependencies=[Depends(require_role(UserRole.MENTOR))],
)
async def upload_signature(
    report_id: str,
    body: AssetUploadRequest,
    mentor_intra_id: str = Depends(get_current_intra_id),
    service: ReportService = Depends(get_report_service),
) -> AssetUploadResponse:
    accepted = await service.upload_signature(report_id, mentor_intra_id, body.key)
    return AssetUploadResponse(accepted=accepted)
