"""
Mock 사용자 시드 스크립트

로그인 플로우 없이 로컬에서 API를 호출해 볼 수 있도록 멘토/카뎃 계정을 넣는다.
이미 있는 intra_id는 건너뛴다 (UserService.join_* 가 멱등).

Usage:
    python scripts/seed_mock_users.py
"""

import asyncio
import logging

from backend.src.common.database.connection import AsyncDatabaseEngine
from backend.src.user.services import UserService


logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger("SEED")

MOCK_MENTORS = [
    {"intra_id": "mentor01", "name": "김멘토", "email": "mentor01@example.com"},
    {"intra_id": "mentor02", "name": "이멘토", "email": "mentor02@example.com"},
]

MOCK_CADETS = [
    {"intra_id": "cadet01", "name": "박카뎃", "is_common": True},
    {"intra_id": "cadet02", "name": "최카뎃", "is_common": False},
]


async def seed_mock_users() -> None:
    db = AsyncDatabaseEngine()
    await db.initialize()

    async with db.get_session() as session:
        service = UserService.from_session(session)
        for mock in MOCK_MENTORS:
            mentor = await service.join_mentor(**mock)
            logger.info(f"[MENTOR] {mentor.intra_id} (id={mentor.id})")
        for mock in MOCK_CADETS:
            cadet = await service.join_cadet(**mock)
            logger.info(f"[CADET] {cadet.intra_id} (id={cadet.id})")

    logger.info("Mock user seeding completed.")
    await db.dispose()


if __name__ == "__main__":
    try:
        asyncio.run(seed_mock_users())
    except KeyboardInterrupt:
        logger.info("Seeding stopped by user.")
