from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """모든 도메인 모델의 최상위 Base 클래스."""

    __abstract__ = True
    type_annotation_map = {}

    id: Any

    def __repr__(self) -> str:
        """디버깅용 객체 문자열을 반환합니다."""
        cols = []
        for col in self.__table__.columns:
            # 본문성 컬럼은 로그를 어지럽히므로 생략
            if col.name in ["content", "feedback_message", "reject_message"]:
                continue

            val = getattr(self, col.name)
            if isinstance(val, datetime):
                val = val.isoformat()
            if isinstance(val, str) and len(val) > 20:
                val = val[:17] + "..."

            cols.append(f"{col.name}={val}")

        return f"<{self.__class__.__name__} {', '.join(cols)}>"


class UUIDPrimaryKeyMixin:
    """UUID 문자열 PK를 사용하는 모델용 믹스인."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)


class CreatedAtMixin:
    """생성 시각만 필요한 모델용 믹스인."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class TimestampMixin(CreatedAtMixin):
    """생성/수정 시각이 필요한 모델용 믹스인."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )
