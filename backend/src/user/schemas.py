"""
User 도메인 Pydantic Schemas
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class JoinRequest(BaseModel):
    """가입 요청. intra_id는 인증 헤더에서 가져온다."""

    name: str | None = Field(None, max_length=50, description="실명")
    email: EmailStr | None = Field(None, description="알림 수신 이메일")
    is_common: bool = Field(True, description="공통과정 여부 (카뎃만 해당)")


class UserResponse(BaseModel):
    id: str
    intra_id: str
    name: str | None = None
    role: str

    model_config = ConfigDict(from_attributes=True)
