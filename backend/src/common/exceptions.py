"""
서비스 계층 공통 예외

호출자가 "대상 없음 / 비즈니스 규칙 거부 / 일시적 저장소 오류"를 구분할 수 있도록
HTTP 상태 코드와 1:1로 대응하는 예외 계층을 제공한다.
재시도는 Conflict에 대해서만 의미가 있다.
"""

from fastapi import status


class ServiceError(Exception):
    """서비스 예외 최상위 클래스."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFound(ServiceError):
    """조회 대상이 존재하지 않음."""

    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ServiceError):
    """저장소 읽기/쓰기 실패 또는 동시 수정 충돌."""

    status_code = status.HTTP_409_CONFLICT


class InvalidTransition(Conflict):
    """현재 상태에서 허용되지 않는 상태 전이."""


class Forbidden(ServiceError):
    """요청자에게 권한이 없음 (e.g., 다른 멘토의 레포트 수정)."""

    status_code = status.HTTP_403_FORBIDDEN


class InvalidInput(ServiceError):
    """잘못된 입력 또는 미완성 레포트 제출."""

    status_code = status.HTTP_400_BAD_REQUEST


class MethodNotAllowed(ServiceError):
    """의미상 막힌 동작 (e.g., 이미 레포트가 있는 로그에 레포트 생성)."""

    status_code = status.HTTP_405_METHOD_NOT_ALLOWED


__all__ = [
    "ServiceError",
    "NotFound",
    "Conflict",
    "InvalidTransition",
    "Forbidden",
    "InvalidInput",
    "MethodNotAllowed",
]
