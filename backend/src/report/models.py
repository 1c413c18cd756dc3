"""
Report 도메인 모델

테이블:
    - reports: 완료된 멘토링 1건에 대한 결과 보고서 (멘토 정산 근거)
"""

from typing import TYPE_CHECKING

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.src.common.enums import ReportStatus
from backend.src.common.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


if TYPE_CHECKING:
    from backend.src.mentoring.models import MentoringLog
    from backend.src.user.models import Cadet, Mentor


class Report(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """
    멘토링 결과 보고서.

    작성중(drafting) 동안 부분 수정되며, 제출(submitted) 시 정산 금액이 확정되고 잠긴다.
    mentor_id / cadet_id는 조회 편의를 위해 멘토링 로그에서 복사해 둔다.
    """

    __tablename__ = "reports"

    mentoring_log_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mentoring_logs.id"), unique=True, nullable=False, comment="멘토링 로그 1:1"
    )
    mentor_id: Mapped[str] = mapped_column(String(36), ForeignKey("mentors.id"), index=True, nullable=False)
    cadet_id: Mapped[str] = mapped_column(String(36), ForeignKey("cadets.id"), index=True, nullable=False)

    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus, name="report_status"), nullable=False, default=ReportStatus.DRAFTING
    )
    topic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    place: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    feedback_message: Mapped[str | None] = mapped_column(Text, nullable=True, comment="카뎃에 대한 피드백")
    feedback1: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback3: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # 스토리지 키 (서명 URL은 외부에서 발급)
    image_url: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list, comment="사진 키 (최대 2개)")
    signature_url: Mapped[str | None] = mapped_column(String(512), nullable=True, comment="서명 키 (최초 1회만)")

    money: Mapped[int] = mapped_column(Integer, nullable=False, default=0, comment="정산 금액 (제출 전 0)")

    # Relationships
    mentoring_log: Mapped["MentoringLog"] = relationship("MentoringLog", back_populates="report", lazy="select")
    mentor: Mapped["Mentor"] = relationship("Mentor", lazy="select")
    cadet: Mapped["Cadet"] = relationship("Cadet", lazy="select")

    # 낙관적 동시성 제어
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version}
