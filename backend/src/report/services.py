"""
Report 도메인 Service

레포트 생명주기:
    멘토링 완료(done) → 레포트 생성(drafting) → 부분 수정 → 제출(submitted, 정산 확정)
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.config import COMPENSATION_CONFIG, REPORT_CONFIG
from backend.src.common.enums import MentoringLogStatus, ReportStatus
from backend.src.common.exceptions import Conflict, Forbidden, InvalidInput, MethodNotAllowed, NotFound
from backend.src.common.repositories.base_repository import DuplicateEntity, RepositoryError, StaleEntity
from backend.src.common.storage.client import AssetStorage
from backend.src.mentoring.repositories import MentoringLogRepository
from backend.src.report.compensation import SERVICE_TZ, calculate_money, to_local
from backend.src.report.compensation import calculate_total_hour as _calculate_total_hour
from backend.src.report.models import Report
from backend.src.report.repositories import ReportRepository
from backend.src.report.schemas import SettlementRow
from backend.src.report.status import ReportStatusValidator


logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("place", "topic", "content", "feedback_message")
_FEEDBACK_FIELDS = ("feedback1", "feedback2", "feedback3")


class ReportService:
    """
    레포트 작성/제출 및 멘토 정산 서비스.
    """

    def __init__(
        self, repository: ReportRepository, mentoring_repository: MentoringLogRepository, storage: AssetStorage
    ) -> None:
        self.repository = repository
        self.mentoring_repository = mentoring_repository
        self.storage = storage

    @classmethod
    def from_session(cls, session: AsyncSession, storage: AssetStorage) -> "ReportService":
        """AsyncSession으로부터 서비스 인스턴스 생성 (Controller용)"""
        return cls(ReportRepository(session), MentoringLogRepository(session), storage)

    # ============================================================
    # 조회
    # ============================================================

    async def get_report(self, report_id: str) -> Report:
        """
        레포트를 멘토링 로그/멘토/카뎃과 함께 조회한다.

        Raises:
            NotFound: 레포트가 없는 경우
            Conflict: 조회 실패
        """
        try:
            report = await self.repository.get_with_relations(report_id)
        except RepositoryError as e:
            raise Conflict("레포트를 찾는중 오류가 발생하였습니다") from e
        if report is None:
            raise NotFound("해당 레포트를 찾을 수 없습니다")
        return report

    async def list_settlements(self, start: date, end: date) -> list[SettlementRow]:
        """
        운영진 정산용: 기간 안에 진행된 멘토링 중 제출된 레포트를 한 줄씩 반환한다.

        Args:
            start: 조회 시작일 (포함)
            end: 조회 종료일 (포함)

        Returns:
            미팅 시작 시각 순 정산 행 목록 (total_hour = money / 시간당 금액)

        Raises:
            InvalidInput: 시작일이 종료일보다 늦은 경우
            Conflict: 조회 실패
        """
        if start > end:
            raise InvalidInput("조회 시작일이 종료일보다 늦을 수 없습니다")

        since = datetime.combine(start, time.min, tzinfo=SERVICE_TZ)
        until = datetime.combine(end + timedelta(days=1), time.min, tzinfo=SERVICE_TZ)
        try:
            reports = await self.repository.list_submitted_between(since, until)
        except RepositoryError as e:
            raise Conflict("정산 대상 레포트를 찾는중 오류가 발생하였습니다") from e

        money_per_hour = COMPENSATION_CONFIG["money_per_hour"]
        rows = []
        for report in reports:
            meeting_start, meeting_end = (to_local(t) for t in report.mentoring_log.meeting_at)
            rows.append(
                SettlementRow(
                    report_id=report.id,
                    mentor_name=report.mentor.name,
                    mentor_intra_id=report.mentor.intra_id,
                    meeting_date=meeting_start.date(),
                    place=report.place,
                    is_common=report.cadet.is_common,
                    start_time=meeting_start.time(),
                    end_time=meeting_end.time(),
                    total_hour=report.money // money_per_hour,
                    money=report.money,
                    cadet_name=report.cadet.name,
                    cadet_intra_id=report.cadet.intra_id,
                )
            )
        logger.info(f"Settlement rows {start} ~ {end}: {len(rows)}")
        return rows

    # ============================================================
    # 생성
    # ============================================================

    async def create_report(self, mentoring_log_id: str, mentor_intra_id: str | None = None) -> str:
        """
        완료된 멘토링 로그에 작성중 레포트를 만든다.

        Args:
            mentoring_log_id: 멘토링 로그 PK
            mentor_intra_id: 요청한 멘토의 인트라 ID (운영진 요청이면 None)

        Returns:
            생성된 report_id

        Raises:
            NotFound: 멘토링 로그가 없는 경우
            Forbidden: 다른 멘토의 멘토링 로그인 경우
            MethodNotAllowed: 이미 레포트가 있거나 완료(done) 상태가 아닌 경우
            Conflict: 저장 실패
        """
        try:
            mentoring_log = await self.mentoring_repository.get_with_relations(mentoring_log_id)
        except RepositoryError as e:
            raise Conflict("멘토링 로그를 찾는중 오류가 발생하였습니다") from e
        if mentoring_log is None:
            raise NotFound("해당 멘토링 로그를 찾을 수 없습니다")

        if mentor_intra_id is not None and mentoring_log.mentor.intra_id != mentor_intra_id:
            raise Forbidden("해당 멘토링 로그에 레포트를 작성할 수 있는 권한이 없습니다")

        if mentoring_log.report is not None:
            raise MethodNotAllowed("해당 멘토링 로그는 이미 레포트를 가지고 있습니다")
        if mentoring_log.status != MentoringLogStatus.DONE:
            raise MethodNotAllowed("해당 멘토링 로그는 레포트를 생성할 수 없습니다")

        try:
            report = await self.repository.create(
                {
                    "mentoring_log_id": mentoring_log.id,
                    "mentoring_log": mentoring_log,
                    "mentor_id": mentoring_log.mentor_id,
                    "cadet_id": mentoring_log.cadet_id,
                    "status": ReportStatus.DRAFTING,
                    "image_url": [],
                    "money": 0,
                }
            )
            mentoring_log.report_status = ReportStatus.DRAFTING
            await self.mentoring_repository.save(mentoring_log)
        except DuplicateEntity as e:
            raise MethodNotAllowed("해당 멘토링 로그는 이미 레포트를 가지고 있습니다") from e
        except (RepositoryError, StaleEntity) as e:
            raise Conflict(f"{e} 저장중 예기치 못한 에러가 발생하였습니다") from e

        logger.info(f"Report Created: {report.id} (mentoringLog={mentoring_log.id})")
        return report.id

    # ============================================================
    # 수정 / 제출
    # ============================================================

    async def update_report(self, report_id: str, requester_intra_id: str, patch: dict[str, Any] | Any) -> bool:
        """
        작성중 레포트를 부분 수정하고, 요청 시 제출까지 진행한다.

        Args:
            report_id: 레포트 PK
            requester_intra_id: 요청한 멘토의 인트라 ID
            patch: ReportUpdateRequest 또는 dict (없는 필드는 유지)

        Raises:
            InvalidInput: 수정할 수 없는 상태이거나 점수 형식이 잘못된 경우
            Forbidden: 담당 멘토가 아닌 경우
        """
        data = patch.model_dump(exclude_unset=True) if hasattr(patch, "model_dump") else dict(patch)
        report = await self.get_report(report_id)

        if not ReportStatusValidator(report.status).verify():
            raise InvalidInput("해당 레포트를 수정할 수 없는 상태입니다")
        if report.mentor.intra_id != requester_intra_id:
            raise Forbidden("해당 레포트를 수정할 수 있는 권한이 없습니다")

        for field in _TEXT_FIELDS:
            value = data.get(field)
            if value is not None:
                setattr(report, field, value)
        for field in _FEEDBACK_FIELDS:
            setattr(report, field, self._coerce_feedback(field, data.get(field), getattr(report, field)))

        await self._persist(report)
        logger.info(f"Report Updated: {report.id} by {requester_intra_id}")

        if data.get("is_done"):
            # 수정 내용은 제출 성공 여부와 무관하게 저장된다
            await self._commit()
            await self.report_done(report.id)
        return True

    async def report_done(self, report_id: str) -> Report:
        """
        레포트를 제출한다: 입력 완료 검증 → 정산 금액 계산 → submitted.

        Raises:
            InvalidInput: 이미 제출되었거나 필수 항목이 비어 있는 경우
            Conflict: 정산 조회/저장 실패
        """
        report = await self.get_report(report_id)

        if not ReportStatusValidator(report.status).verify():
            raise InvalidInput("이미 제출된 레포트입니다")
        if not self.is_entered_report(report):
            raise InvalidInput("입력이 완료되지 못해 제출할 수 없습니다")

        mentoring_log = report.mentoring_log
        meeting_at = mentoring_log.meeting_at
        if meeting_at is None:
            raise Conflict("확정된 미팅 시간이 없는 멘토링입니다")

        hours = await self.calculate_total_hour(
            report.mentor_id, meeting_at[0], meeting_at[1], exclude_mentoring_log_id=mentoring_log.id
        )

        report.money = calculate_money(hours)
        report.status = ReportStatus.SUBMITTED
        mentoring_log.report_status = ReportStatus.SUBMITTED
        await self._persist(report)
        try:
            await self.mentoring_repository.save(mentoring_log)
        except (RepositoryError, StaleEntity) as e:
            raise Conflict(f"{e} 저장중 예기치 못한 에러가 발생하였습니다") from e

        logger.info(f"Report Submitted: {report.id} ({hours}h, money={report.money})")
        return report

    async def calculate_total_hour(
        self, mentor_id: str, start: datetime, end: datetime, exclude_mentoring_log_id: str | None = None
    ) -> int:
        """
        멘토의 다른 완료 멘토링을 조회해 이번 세션의 인정 시간을 계산한다.

        Raises:
            Conflict: 조회 실패
        """
        try:
            finished = await self.mentoring_repository.list_done_meetings(
                mentor_id, exclude_id=exclude_mentoring_log_id
            )
        except RepositoryError as e:
            raise Conflict("멘토링 시간을 찾는 중 오류가 발생했습니다.") from e
        return _calculate_total_hour(start, end, finished)

    @staticmethod
    def is_entered_report(report: Report) -> bool:
        """제출에 필요한 항목이 모두 채워졌는지 확인한다."""
        required = [
            report.image_url,
            report.signature_url,
            report.topic,
            report.place,
            report.content,
            report.feedback_message,
            report.feedback1,
            report.feedback2,
            report.feedback3,
        ]
        return all(required)

    # ============================================================
    # 사진 / 서명 업로드
    # ============================================================

    async def upload_image(self, report_id: str, requester_intra_id: str, image_key: str) -> bool:
        """
        사진 키를 추가한다. 이미 최대 개수면 거부하고 업로드된 파일을 삭제한다.

        Returns:
            저장되면 True, 정원 초과로 거부되면 False
        """
        report = await self._get_uploadable_report(report_id, requester_intra_id, image_key)

        current = list(report.image_url or [])
        if len(current) >= REPORT_CONFIG["max_images"]:
            logger.info(f"Report {report.id}: image limit reached, discarding {image_key}")
            await self._discard_asset(image_key)
            return False

        # JSON 컬럼은 새 리스트를 대입해야 변경이 감지된다
        report.image_url = [*current, image_key]
        await self._persist_upload(report, image_key)
        return True

    async def upload_signature(self, report_id: str, requester_intra_id: str, signature_key: str) -> bool:
        """
        서명 키를 저장한다. 이미 서명이 있으면 거부하고 업로드된 파일을 삭제한다.

        Returns:
            저장되면 True, 이미 서명이 있어 거부되면 False
        """
        report = await self._get_uploadable_report(report_id, requester_intra_id, signature_key)

        if report.signature_url:
            logger.info(f"Report {report.id}: signature already stored, discarding {signature_key}")
            await self._discard_asset(signature_key)
            return False

        report.signature_url = signature_key
        await self._persist_upload(report, signature_key)
        return True

    # ============================================================
    # Internal
    # ============================================================

    @staticmethod
    def _coerce_feedback(field: str, value: Any, current: int | None) -> int | None:
        if value is None or value == "":
            return current
        try:
            score = int(value)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"{field}: 숫자를 입력해야 합니다 ({value!r})") from e
        if not REPORT_CONFIG["feedback_min"] <= score <= REPORT_CONFIG["feedback_max"]:
            raise InvalidInput(
                f"{field}: {REPORT_CONFIG['feedback_min']}~{REPORT_CONFIG['feedback_max']} 사이여야 합니다"
            )
        return score

    async def _get_uploadable_report(self, report_id: str, requester_intra_id: str, key: str) -> Report:
        try:
            report = await self.get_report(report_id)
            if not ReportStatusValidator(report.status).verify():
                raise InvalidInput("해당 레포트를 수정할 수 없는 상태입니다")
            if report.mentor.intra_id != requester_intra_id:
                raise Forbidden("해당 레포트를 수정할 수 있는 권한이 없습니다")
        except (NotFound, InvalidInput, Forbidden, Conflict):
            await self._discard_asset(key)
            raise
        return report

    async def _persist_upload(self, report: Report, key: str) -> None:
        try:
            await self._persist(report)
        except Conflict:
            await self._discard_asset(key)
            raise

    async def _persist(self, report: Report) -> None:
        try:
            await self.repository.save(report)
        except StaleEntity as e:
            raise Conflict("다른 요청이 먼저 레포트를 변경했습니다. 다시 시도해 주세요") from e
        except RepositoryError as e:
            raise Conflict(f"{e} 저장중 예기치 못한 에러가 발생하였습니다") from e

    async def _commit(self) -> None:
        try:
            await self.repository.session.commit()
        except Exception as e:
            logger.error(f"Report commit failed: {e}")
            raise Conflict(f"{e} 저장중 예기치 못한 에러가 발생하였습니다") from e

    async def _discard_asset(self, key: str) -> None:
        try:
            await self.storage.delete(key)
        except Exception as e:
            logger.warning(f"asset {key} 삭제 실패: {e}")
