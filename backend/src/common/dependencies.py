"""
애플리케이션 수명 동안 공유되는 포트(알림, 자동취소 스케줄러, 스토리지) 의존성.

인스턴스는 lifespan에서 생성되어 ``app.state``에 보관된다.
"""

from fastapi import Request

from backend.src.common.notification.client import Notifier
from backend.src.common.storage.client import AssetStorage
from backend.src.mentoring.services.auto_cancel import AutoCancelScheduler


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_scheduler(request: Request) -> AutoCancelScheduler:
    return request.app.state.scheduler


def get_asset_storage(request: Request) -> AssetStorage:
    return request.app.state.asset_storage
