"""
Asset Storage 포트

레포트 이미지/서명 파일은 외부 오브젝트 스토리지에 업로드되고 DB에는 키만 저장된다.
코어는 정원 초과로 버려진 업로드를 지우는 ``delete``만 사용한다.
"""

import logging
from abc import ABC, abstractmethod


logger = logging.getLogger(__name__)


class AssetStorage(ABC):
    @abstractmethod
    async def delete(self, key: str) -> None:
        """키에 해당하는 파일을 삭제한다."""


class LoggingAssetStorage(AssetStorage):
    """삭제 요청을 기록만 하는 기본 구현."""

    def __init__(self) -> None:
        self.deleted: list[str] = []

    async def delete(self, key: str) -> None:
        self.deleted.append(key)
        logger.info(f"[storage:log] delete {key}")
