"""
Mentoring 도메인 모델

테이블:
    - mentoring_logs: 멘토 ↔ 카뎃 멘토링 신청 1건과 그 생명주기

시간 구간(시작, 종료)은 start/end 두 컬럼으로 저장하고 튜플 프로퍼티로 노출한다.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.src.common.enums import MentoringLogStatus, ReportStatus
from backend.src.common.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


if TYPE_CHECKING:
    from backend.src.report.models import Report
    from backend.src.user.models import Cadet, Mentor


TimeRange = tuple[datetime, datetime]


class MentoringLog(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """
    멘토링 신청 기록.

    카뎃 신청(waiting) → 멘토 확정(confirmed) / 거절(rejected) / 자동취소(auto-cancelled)
    → 진행 완료(done) → 레포트 작성의 전체 라이프사이클을 추적한다. 삭제하지 않는다.
    """

    __tablename__ = "mentoring_logs"

    mentor_id: Mapped[str] = mapped_column(String(36), ForeignKey("mentors.id"), index=True, nullable=False)
    cadet_id: Mapped[str] = mapped_column(String(36), ForeignKey("cadets.id"), index=True, nullable=False)

    status: Mapped[MentoringLogStatus] = mapped_column(
        Enum(MentoringLogStatus, name="mentoring_log_status"),
        nullable=False,
        default=MentoringLogStatus.WAITING,
        index=True,
    )
    topic: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    reject_message: Mapped[str | None] = mapped_column(Text, nullable=True, comment="거절 사유")

    # 후보 시간 (1번은 필수)
    request_time1_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    request_time1_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    request_time2_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    request_time2_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    request_time3_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    request_time3_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # 확정된 미팅 시간 (confirmed 이후에만 채워짐)
    meeting_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    meeting_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    report_status: Mapped[ReportStatus | None] = mapped_column(
        Enum(ReportStatus, name="report_status"), nullable=True, comment="연결된 레포트 상태 (없으면 Null)"
    )

    # Relationships
    mentor: Mapped["Mentor"] = relationship("Mentor", back_populates="mentoring_logs", lazy="select")
    cadet: Mapped["Cadet"] = relationship("Cadet", back_populates="mentoring_logs", lazy="select")
    report: Mapped["Report | None"] = relationship(
        "Report", back_populates="mentoring_log", uselist=False, lazy="select"
    )

    # 낙관적 동시성 제어: 오래된 버전으로 flush하면 StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version}

    @property
    def request_times(self) -> list[TimeRange]:
        """입력된 후보 시간 목록 (순서 유지)."""
        pairs = [
            (self.request_time1_start, self.request_time1_end),
            (self.request_time2_start, self.request_time2_end),
            (self.request_time3_start, self.request_time3_end),
        ]
        return [(start, end) for start, end in pairs if start is not None and end is not None]

    @property
    def meeting_at(self) -> TimeRange | None:
        if self.meeting_start is None or self.meeting_end is None:
            return None
        return self.meeting_start, self.meeting_end
