"""
Mentoring API (FastAPI)

역할:
    - 카뎃 신청 / 멘토 확정·거절 / 레포트 작성·제출 HTTP API
    - 자동취소 스케줄러, 메일 발송, 스토리지 포트의 생명주기 관리

구조:
    router (Controller) → services (Service) → repositories (Repository)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.src.common.database.connection import AsyncDatabaseEngine
from backend.src.common.exceptions import ServiceError
from backend.src.common.notification.client import get_notifier
from backend.src.common.schemas.base import ErrorResponse
from backend.src.common.storage.client import LoggingAssetStorage
from backend.src.mentoring.router import router as mentoring_router
from backend.src.mentoring.services.auto_cancel import AutoCancelScheduler
from backend.src.report.router import router as report_router
from backend.src.user.router import router as user_router


# ============================================================
# Setup
# ============================================================
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ============================================================
# Lifecycle
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Mentoring API...")
    db_engine = AsyncDatabaseEngine()
    await db_engine.initialize()

    app.state.notifier = get_notifier()
    app.state.scheduler = AutoCancelScheduler(db_engine.get_session, app.state.notifier)
    app.state.asset_storage = LoggingAssetStorage()
    logger.info("Database & ports ready")

    yield

    logger.info("Shutting down API...")
    # 재시작 시 대기 중이던 자동취소 타이머는 복구되지 않는다
    await app.state.scheduler.shutdown()
    await app.state.notifier.drain()
    await db_engine.dispose()
    logger.info("Database connections closed")


app = FastAPI(
    title="Mentoring API",
    description="Mentoring lifecycle & mentor compensation API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user_router)
app.include_router(mentoring_router)
app.include_router(report_router)


@app.get("/")
async def root():
    return {"status": "operational", "version": "1.0.0"}


# ============================================================
# Error Handler
# ============================================================
@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    body = ErrorResponse(error=type(exc).__name__, message=exc.message, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


# ============================================================
# 서버 실행 가이드
# ============================================================
"""
[실행 방법]
   # 개발 모드 (SQLite, 스키마 자동 생성)
   DATABASE_URL=sqlite+aiosqlite:///./mentoring.db AUTO_CREATE_SCHEMA=1 \
       python -m uvicorn backend.main:app --reload --port 8000

   # 프로덕션 모드
   python -m uvicorn backend.main:app --host 0.0.0.0 --port 8000

   자동취소 타이머는 프로세스 메모리에 있으므로 워커는 1개로 운영한다.

[검증 명령어]
   curl -X POST http://localhost:8000/api/mentorings/apply/mentor01 \
     -H "X-Intra-Id: cadet01" -H "X-User-Role: cadet" -H "Content-Type: application/json" \
     -d '{"topic": "진로 상담", "content": "...", "request_times": [{"start": "2026-10-20T19:00:00+09:00", "end": "2026-10-20T21:00:00+09:00"}]}'
"""
