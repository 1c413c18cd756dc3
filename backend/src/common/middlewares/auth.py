"""
요청자 식별 의존성.

토큰 검증은 앞단 인증 게이트웨이가 처리하고, 검증된 인트라 ID와 역할을
헤더(X-Intra-Id, X-User-Role)로 전달한다. 여기서는 그 값을 꺼내고 역할만 확인한다.
"""

import logging

from fastapi import Header, HTTPException, status

from backend.src.common.enums import UserRole


logger = logging.getLogger(__name__)


async def get_current_intra_id(x_intra_id: str = Header(..., description="인증된 사용자의 인트라 ID")) -> str:
    intra_id = x_intra_id.strip()
    if not intra_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing intra id")
    return intra_id


def require_role(*roles: UserRole):
    """
    허용된 역할만 통과시키는 의존성을 만든다.

    Raises:
        HTTPException(403): 역할이 허용 목록에 없을 경우
    """

    async def _check(x_user_role: str = Header(..., description="인증된 사용자의 역할")) -> UserRole:
        try:
            role = UserRole(x_user_role)
        except ValueError:
            role = None
        if role not in roles:
            logger.warning(f"Unauthorized access attempt with role {x_user_role}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
        return role

    return _check
