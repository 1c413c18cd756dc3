"""
User 도메인 테스트

멘토/카뎃 가입과 intra_id 기반 조회, 인증 헤더 처리 검증.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.exceptions import NotFound
from backend.src.user.models import Mentor
from backend.src.user.services import UserService


# ============================================================
# Service 단위 테스트
# ============================================================
class TestUserService:
    """UserService 비즈니스 로직 단위 테스트."""

    async def test_get_mentor_success(self, session: AsyncSession, mentor: Mentor):
        service = UserService.from_session(session)
        found = await service.get_mentor(mentor.intra_id)

        assert found.id == mentor.id

    async def test_get_mentor_not_found(self, session: AsyncSession):
        service = UserService.from_session(session)

        with pytest.raises(NotFound):
            await service.get_mentor("nobody")

    async def test_get_cadet_not_found(self, session: AsyncSession):
        service = UserService.from_session(session)

        with pytest.raises(NotFound):
            await service.get_cadet("nobody")

    async def test_join_mentor_is_idempotent(self, session: AsyncSession):
        """같은 intra_id로 두 번 가입하면 기존 계정을 그대로 돌려준다."""
        service = UserService.from_session(session)
        first = await service.join_mentor("mentor99", name="최멘토")
        second = await service.join_mentor("mentor99", name="다른 이름")

        assert first.id == second.id
        assert second.name == "최멘토"

    async def test_join_cadet(self, session: AsyncSession):
        service = UserService.from_session(session)
        cadet = await service.join_cadet("cadet99", is_common=False)

        assert cadet.id is not None
        assert cadet.is_common is False


# ============================================================
# API 엔드포인트 테스트
# ============================================================
class TestUserAPI:
    """User API 엔드포인트 통합 테스트."""

    async def test_join_mentor(self, client: AsyncClient):
        response = await client.post(
            "/api/mentors/join",
            headers={"X-Intra-Id": "mentor77", "X-User-Role": "mentor"},
            json={"name": "정멘토", "email": "mentor77@example.com"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["intra_id"] == "mentor77"
        assert data["role"] == "mentor"

    async def test_join_with_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/cadets/join",
            headers={"X-Intra-Id": "cadet77", "X-User-Role": "cadet"},
            json={"email": "not-an-email"},
        )

        assert response.status_code == 422  # Pydantic 유효성 검사 실패

    async def test_wrong_role(self, client: AsyncClient):
        response = await client.post(
            "/api/mentors/join", headers={"X-Intra-Id": "cadet77", "X-User-Role": "cadet"}, json={}
        )

        assert response.status_code == 403

    async def test_missing_identity_headers(self, client: AsyncClient):
        response = await client.post("/api/mentors/join", json={})

        assert response.status_code == 422
