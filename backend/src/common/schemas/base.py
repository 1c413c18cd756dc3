from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Used for all API error responses.

    Example:
        ```json
        {
            "error": "MethodNotAllowed",
            "message": "해당 멘토링 로그는 이미 레포트를 가지고 있습니다",
            "status_code": 405,
            "timestamp": "2026-10-18T10:30:00Z"
        }
        ```
    """

    error: str = Field(..., description="Error type/category")
    message: str = Field(..., description="Human-readable error message")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Error occurrence time")
    details: dict | None = Field(None, description="Additional error context")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Forbidden",
                "message": "해당 레포트를 수정할 수 있는 권한이 없습니다",
                "status_code": 403,
                "timestamp": "2026-10-18T10:30:00Z",
            }
        }
    )


__all__ = ["ErrorResponse"]
