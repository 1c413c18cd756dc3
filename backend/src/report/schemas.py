"""
Report 도메인 Pydantic Schemas
"""

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field

from backend.src.common.enums import ReportStatus


class ReportCreateResponse(BaseModel):
    report_id: str


class ReportUpdateRequest(BaseModel):
    """
    레포트 부분 수정 요청.

    비어 있는 필드는 기존 값을 유지한다. 점수는 문자열로 와도 정수로 변환한다.
    """

    place: str | None = Field(None, max_length=255)
    topic: str | None = Field(None, max_length=255)
    content: str | None = None
    feedback_message: str | None = None
    feedback1: int | str | None = None
    feedback2: int | str | None = None
    feedback3: int | str | None = None
    is_done: bool = Field(False, description="true면 수정 후 바로 제출")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "place": "개포 클러스터 3층",
                "topic": "취업 준비 상담",
                "content": "이력서 리뷰와 포트폴리오 방향 논의",
                "feedback_message": "준비가 잘 되어 있음",
                "feedback1": 5,
                "feedback2": "4",
                "feedback3": 5,
                "is_done": False,
            }
        },
    )


class AssetUploadRequest(BaseModel):
    """스토리지에 업로드가 끝난 파일의 키."""

    key: str = Field(..., min_length=1, max_length=512)


class AssetUploadResponse(BaseModel):
    accepted: bool = Field(..., description="false면 정원 초과로 거부되어 업로드 파일이 삭제됨")


class ReportResponse(BaseModel):
    id: str
    mentoring_log_id: str
    mentor_id: str
    cadet_id: str
    status: ReportStatus
    topic: str | None = None
    place: str | None = None
    content: str | None = None
    feedback_message: str | None = None
    feedback1: int | None = None
    feedback2: int | None = None
    feedback3: int | None = None
    image_url: list[str] = Field(default_factory=list)
    signature_url: str | None = None
    money: int
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# 운영진 정산
# ============================================================
class SettlementRow(BaseModel):
    """정산 엑셀 한 줄 (제출된 레포트 1건)."""

    report_id: str
    mentor_name: str | None = None
    mentor_intra_id: str
    meeting_date: date = Field(..., description="미팅 날짜 (서비스 타임존)")
    place: str | None = None
    is_common: bool = Field(..., description="카뎃 공통과정 여부")
    start_time: time
    end_time: time
    total_hour: int = Field(..., description="정산 인정 시간 (money / 시간당 금액)")
    money: int
    cadet_name: str | None = None
    cadet_intra_id: str
