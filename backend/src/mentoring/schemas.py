"""
Mentoring 도메인 Pydantic Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from backend.src.common.enums import MentoringLogStatus, ReportStatus


class TimeRangeIn(BaseModel):
    """(시작, 종료) 시간 구간."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self) -> "TimeRangeIn":
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("start and end must both have or both omit a timezone offset")
        if self.start >= self.end:
            raise ValueError("end must be later than start")
        return self

    def as_tuple(self) -> tuple[datetime, datetime]:
        return self.start, self.end


# ============================================================
# 카뎃 신청
# ============================================================
class MentoringApplyRequest(BaseModel):
    """멘토링 신청 요청."""

    topic: str = Field(..., min_length=1, max_length=255, description="멘토링 주제")
    content: str = Field(..., min_length=1, description="질문/요청 내용")
    request_times: list[TimeRangeIn] = Field(..., min_length=1, max_length=3, description="희망 시간 (1~3개)")

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("topic cannot be empty")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "topic": "42서울 이후 진로 상담",
                "content": "백엔드 개발자로 취업하려면 무엇을 준비해야 할까요?",
                "request_times": [{"start": "2026-10-20T19:00:00+09:00", "end": "2026-10-20T21:00:00+09:00"}],
            }
        },
    )


# ============================================================
# 멘토 응답
# ============================================================
class MeetingUpdateRequest(BaseModel):
    """멘토의 일정 확정/거절 요청."""

    mentoring_log_id: str
    status: MentoringLogStatus = Field(..., description="confirmed 또는 rejected")
    meeting_at: TimeRangeIn | None = Field(None, description="확정 시 필수")
    reject_message: str | None = Field(None, description="거절 사유")

    @model_validator(mode="after")
    def validate_payload(self) -> "MeetingUpdateRequest":
        if self.status not in (MentoringLogStatus.CONFIRMED, MentoringLogStatus.REJECTED):
            raise ValueError("status must be 'confirmed' or 'rejected'")
        if self.status == MentoringLogStatus.CONFIRMED and self.meeting_at is None:
            raise ValueError("meeting_at is required to confirm")
        return self


# ============================================================
# 응답
# ============================================================
class MentoringLogResponse(BaseModel):
    """멘토링 로그 응답."""

    id: str
    mentor_id: str
    cadet_id: str
    status: MentoringLogStatus
    topic: str
    content: str
    reject_message: str | None = None
    request_times: list[tuple[datetime, datetime]]
    meeting_at: tuple[datetime, datetime] | None = None
    report_status: ReportStatus | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
