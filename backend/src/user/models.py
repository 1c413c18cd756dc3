"""
User 도메인 모델

테이블:
    - mentors: 멘토 계정
    - cadets: 카뎃(교육생) 계정

계정 생성/로그인은 외부 인증 플로우가 담당하며, 코어는 intra_id로 조회만 한다.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.src.common.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


if TYPE_CHECKING:
    from backend.src.mentoring.models import MentoringLog


# ============================================================
# Mentor
# ============================================================


class Mentor(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """멘토 계정 테이블."""

    __tablename__ = "mentors"

    intra_id: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False, comment="인트라 ID")
    name: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="실명")
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, comment="알림 수신 이메일")

    mentoring_logs: Mapped[list["MentoringLog"]] = relationship(
        "MentoringLog", back_populates="mentor", lazy="select"
    )


# ============================================================
# Cadet
# ============================================================


class Cadet(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """카뎃 계정 테이블."""

    __tablename__ = "cadets"

    intra_id: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False, comment="인트라 ID")
    name: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="실명")
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, comment="알림 수신 이메일")
    is_common: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, comment="공통과정 여부")

    mentoring_logs: Mapped[list["MentoringLog"]] = relationship(
        "MentoringLog", back_populates="cadet", lazy="select"
    )
