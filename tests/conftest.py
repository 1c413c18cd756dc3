"""
pytest 공용 픽스처 모음

테스트 전략:
- 테스트마다 tmp_path 아래 SQLite(aiosqlite) 파일 DB를 새로 만들고 모델로 스키마 생성
- 자동취소 스케줄러는 자체 세션을 열기 때문에 파일 DB로 여러 커넥션이 같은 데이터를 보게 한다
- 메일/스토리지 포트는 호출 이력을 보관하는 Logging 구현으로 대체
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backend.main import app
from backend.src.common.models.base import Base
from backend.src.common.notification.client import LoggingNotifier
from backend.src.common.storage.client import LoggingAssetStorage
from backend.src.mentoring.models import MentoringLog
from backend.src.mentoring.services.auto_cancel import AutoCancelScheduler
from backend.src.report import models as report_models  # noqa: F401
from backend.src.user.models import Cadet, Mentor


# ============================================================
# 1. 엔진 & 세션
# ============================================================
@pytest_asyncio.fixture
async def engine(tmp_path):
    """테스트 전용 SQLite 엔진 (함수 스코프, 테스트마다 독립 DB)."""
    _engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'mentoring.db'}", echo=False)
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session_factory(session_maker):
    """
    AsyncDatabaseEngine.get_session과 같은 규약(성공 시 commit, 실패 시 rollback)의 세션 팩토리.

    서비스 호출을 요청 단위로 흉내낼 때와 스케줄러 주입에 사용한다.
    """

    @asynccontextmanager
    async def _scope() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    return _scope


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """테스트 본문에서 직접 쓰는 세션. 다른 세션에 보이려면 명시적으로 commit 한다."""
    async with session_maker() as s:
        yield s


# ============================================================
# 2. 포트 (메일, 스토리지, 자동취소)
# ============================================================
@pytest_asyncio.fixture
async def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest_asyncio.fixture
async def storage() -> LoggingAssetStorage:
    return LoggingAssetStorage()


@pytest_asyncio.fixture
async def scheduler(session_factory, notifier) -> AsyncGenerator[AutoCancelScheduler, None]:
    _scheduler = AutoCancelScheduler(session_factory, notifier)
    yield _scheduler
    await _scheduler.shutdown()


# ============================================================
# 3. FastAPI AsyncClient
# ============================================================
@pytest_asyncio.fixture
async def client(session_factory, notifier, scheduler, storage) -> AsyncGenerator[AsyncClient, None]:
    """
    FastAPI 앱의 AsyncClient.

    모든 라우터의 get_session 의존성을 테스트 DB 세션으로, 공용 포트를 테스트 구현으로 교체.
    """
    from backend.src.common import dependencies
    from backend.src.mentoring.router import get_session as mentoring_get_session
    from backend.src.report.router import get_session as report_get_session
    from backend.src.user.router import get_session as user_get_session

    async def override_get_session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[mentoring_get_session] = override_get_session
    app.dependency_overrides[report_get_session] = override_get_session
    app.dependency_overrides[user_get_session] = override_get_session
    app.dependency_overrides[dependencies.get_notifier] = lambda: notifier
    app.dependency_overrides[dependencies.get_scheduler] = lambda: scheduler
    app.dependency_overrides[dependencies.get_asset_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================
# 4. 공통 테스트 데이터
# ============================================================
@pytest_asyncio.fixture
async def mentor(session: AsyncSession) -> Mentor:
    _mentor = Mentor(intra_id="mentor01", name="김멘토", email="mentor01@example.com")
    session.add(_mentor)
    await session.commit()
    return _mentor


@pytest_asyncio.fixture
async def other_mentor(session: AsyncSession) -> Mentor:
    _mentor = Mentor(intra_id="mentor02", name="이멘토")
    session.add(_mentor)
    await session.commit()
    return _mentor


@pytest_asyncio.fixture
async def cadet(session: AsyncSession) -> Cadet:
    _cadet = Cadet(intra_id="cadet01", name="박카뎃", is_common=False)
    session.add(_cadet)
    await session.commit()
    return _cadet


@pytest_asyncio.fixture
async def make_log(session: AsyncSession, mentor: Mentor, cadet: Cadet):
    """원하는 상태의 멘토링 로그를 바로 만드는 팩토리 (commit 포함)."""

    async def _make(status, meeting_at: tuple[datetime, datetime] | None = None, **extra) -> MentoringLog:
        log = MentoringLog(
            mentor_id=extra.pop("mentor_id", mentor.id),
            cadet_id=cadet.id,
            status=status,
            topic=extra.pop("topic", "진로 상담"),
            content=extra.pop("content", "백엔드 취업 준비"),
            request_time1_start=datetime(2026, 10, 20, 19, 0),
            request_time1_end=datetime(2026, 10, 20, 21, 0),
            meeting_start=meeting_at[0] if meeting_at else None,
            meeting_end=meeting_at[1] if meeting_at else None,
            **extra,
        )
        session.add(log)
        await session.commit()
        return log

    return _make
