"""
Mentoring 도메인 Service

멘토링 로그 상태 머신:
    카뎃 신청(waiting) → 멘토 확정(confirmed) / 거절(rejected) / 자동취소(auto-cancelled)
    → 완료(done)
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.common.config import MENTORING_CONFIG
from backend.src.common.enums import MailType, MentoringLogStatus
from backend.src.common.exceptions import Conflict, Forbidden, InvalidInput, NotFound
from backend.src.common.notification.client import Notifier
from backend.src.common.repositories.base_repository import RepositoryError, StaleEntity
from backend.src.mentoring.models import MentoringLog, TimeRange
from backend.src.mentoring.repositories import MentoringLogRepository
from backend.src.mentoring.services.auto_cancel import AutoCancelScheduler
from backend.src.mentoring.state import ensure_transition
from backend.src.user.services import UserService


logger = logging.getLogger(__name__)


def validate_time_range(time_range: TimeRange | None, label: str) -> TimeRange:
    """(시작, 종료) 쌍이 온전한지 확인한다."""
    if time_range is None or len(time_range) != 2:
        raise InvalidInput(f"{label}: 시작/종료 시간이 모두 필요합니다")
    start, end = time_range
    if not isinstance(start, datetime) or not isinstance(end, datetime):
        raise InvalidInput(f"{label}: 시간 형식이 올바르지 않습니다")
    try:
        ordered = start < end
    except TypeError as e:
        # naive/aware 혼용
        raise InvalidInput(f"{label}: 시작/종료 시간의 타임존 정보가 일치하지 않습니다") from e
    if not ordered:
        raise InvalidInput(f"{label}: 종료 시간이 시작 시간보다 늦어야 합니다")
    return start, end


class MentoringService:
    """
    멘토링 로그 생명주기 서비스.

    상태 전이는 ``mentoring.state``의 전이표로만 허용되며,
    알림은 fire-and-forget, 자동취소는 AutoCancelScheduler에 위임한다.
    """

    def __init__(
        self,
        repository: MentoringLogRepository,
        user_service: UserService,
        notifier: Notifier,
        scheduler: AutoCancelScheduler,
    ) -> None:
        self.repository = repository
        self.user_service = user_service
        self.notifier = notifier
        self.scheduler = scheduler

    @classmethod
    def from_session(
        cls, session: AsyncSession, notifier: Notifier, scheduler: AutoCancelScheduler
    ) -> "MentoringService":
        """AsyncSession과 공용 포트로부터 서비스 인스턴스 생성 (Controller용)"""
        return cls(MentoringLogRepository(session), UserService.from_session(session), notifier, scheduler)

    # ============================================================
    # 조회
    # ============================================================

    async def get_log(self, mentoring_log_id: str) -> MentoringLog:
        """
        멘토링 로그를 조회한다.

        Raises:
            NotFound: 로그가 없는 경우
            Conflict: 조회 실패
        """
        try:
            mentoring_log = await self.repository.get(mentoring_log_id)
        except RepositoryError as e:
            raise Conflict("멘토링 로그를 찾는중 오류가 발생하였습니다") from e
        if mentoring_log is None:
            raise NotFound(f"해당 멘토링 로그를 찾을 수 없습니다 ({mentoring_log_id})")
        return mentoring_log

    async def list_mentor_logs(self, mentor_intra_id: str) -> Sequence[MentoringLog]:
        mentor = await self.user_service.get_mentor(mentor_intra_id)
        return await self.repository.list_by_mentor(mentor.id)

    async def list_cadet_logs(self, cadet_intra_id: str) -> Sequence[MentoringLog]:
        cadet = await self.user_service.get_cadet(cadet_intra_id)
        return await self.repository.list_by_cadet(cadet.id)

    # ============================================================
    # 카뎃 신청
    # ============================================================

    async def apply(
        self,
        cadet_intra_id: str,
        mentor_intra_id: str,
        topic: str,
        content: str,
        request_times: Sequence[TimeRange],
    ) -> MentoringLog:
        """
        카뎃의 멘토링 신청을 등록한다.

        1. 입력 검증 (주제/내용, 후보 시간 1~3개)
        2. waiting 상태로 로그 생성
        3. 커밋 후 멘토에게 예약 메일 (fire-and-forget) 및 자동취소 타이머 등록

        Raises:
            InvalidInput: 입력이 올바르지 않은 경우
            NotFound: 멘토/카뎃이 없는 경우
            Conflict: 저장 실패
        """
        if not topic or not topic.strip():
            raise InvalidInput("멘토링 주제를 입력해야 합니다")
        if not content or not content.strip():
            raise InvalidInput("멘토링 내용을 입력해야 합니다")

        max_times = MENTORING_CONFIG["max_request_times"]
        if not request_times:
            raise InvalidInput("최소 1개의 희망 시간이 필요합니다")
        if len(request_times) > max_times:
            raise InvalidInput(f"희망 시간은 최대 {max_times}개까지 입력할 수 있습니다")
        times = [validate_time_range(t, f"requestTime{i}") for i, t in enumerate(request_times, start=1)]

        mentor = await self.user_service.get_mentor(mentor_intra_id)
        cadet = await self.user_service.get_cadet(cadet_intra_id)

        log_data = {
            "mentor_id": mentor.id,
            "cadet_id": cadet.id,
            "status": MentoringLogStatus.WAITING,
            "topic": topic.strip(),
            "content": content,
            "report_status": None,
        }
        for i, (start, end) in enumerate(times, start=1):
            log_data[f"request_time{i}_start"] = start
            log_data[f"request_time{i}_end"] = end

        try:
            mentoring_log = await self.repository.create(log_data)
        except RepositoryError as e:
            raise Conflict(f"{e} 저장중 예기치 못한 에러가 발생하였습니다") from e
        logger.info(f"MentoringLog Created: {mentoring_log.id} ({cadet_intra_id} -> {mentor_intra_id})")

        mentoring_log_id = mentoring_log.id

        def _on_commit() -> None:
            self.notifier.send(mentoring_log_id, MailType.RESERVATION)
            try:
                self.scheduler.schedule_auto_cancel(mentoring_log_id, MENTORING_CONFIG["auto_cancel_delay_ms"])
            except Exception as e:
                logger.warning(f"autoCancel 등록 실패: {mentoring_log_id} - {e}")

        self._after_commit(_on_commit)
        return mentoring_log

    # ============================================================
    # 멘토 응답
    # ============================================================

    async def set_meeting_at(
        self,
        mentoring_log_id: str,
        mentor_intra_id: str,
        status: MentoringLogStatus,
        meeting_at: TimeRange | None = None,
        reject_message: str | None = None,
    ) -> MentoringLog:
        """
        멘토의 응답을 요청된 결과 상태에 따라 확정 또는 거절로 처리한다.

        카뎃에게 보내는 메일 종류는 결과 상태로만 결정된다
        (confirmed → ApproveToCadet, rejected → CancelToCadet).
        """
        status = MentoringLogStatus(status)
        if status == MentoringLogStatus.CONFIRMED:
            return await self.confirm(mentoring_log_id, mentor_intra_id, meeting_at)
        if status == MentoringLogStatus.REJECTED:
            return await self.reject(mentoring_log_id, mentor_intra_id, reject_message)
        raise InvalidInput(f"멘토는 멘토링 상태를 '{status}'(으)로 변경할 수 없습니다")

    async def confirm(self, mentoring_log_id: str, mentor_intra_id: str, meeting_at: TimeRange | None) -> MentoringLog:
        """
        waiting → confirmed. 미팅 시간을 확정하고 카뎃에게 승인 메일을 보낸다.

        Raises:
            InvalidInput: 미팅 시간이 올바르지 않은 경우
            Forbidden: 담당 멘토가 아닌 경우
            InvalidTransition: waiting 상태가 아닌 경우
        """
        start, end = validate_time_range(meeting_at, "meetingAt")
        mentoring_log = await self._get_owned_log(mentoring_log_id, mentor_intra_id)
        ensure_transition(mentoring_log.status, MentoringLogStatus.CONFIRMED)

        mentoring_log.status = MentoringLogStatus.CONFIRMED
        mentoring_log.meeting_start = start
        mentoring_log.meeting_end = end
        await self._persist(mentoring_log)

        self._after_commit(self._respond_to_cadet(mentoring_log.id, MailType.APPROVE_TO_CADET))
        logger.info(f"MentoringLog Confirmed: {mentoring_log.id} ({start.isoformat()} ~ {end.isoformat()})")
        return mentoring_log

    async def reject(self, mentoring_log_id: str, mentor_intra_id: str, reject_message: str | None) -> MentoringLog:
        """
        waiting → rejected. 자동취소 타이머를 해제하고 카뎃에게 취소 메일을 보낸다.

        Raises:
            Forbidden: 담당 멘토가 아닌 경우
            InvalidTransition: waiting 상태가 아닌 경우
        """
        mentoring_log = await self._get_owned_log(mentoring_log_id, mentor_intra_id)
        ensure_transition(mentoring_log.status, MentoringLogStatus.REJECTED)

        mentoring_log.status = MentoringLogStatus.REJECTED
        mentoring_log.reject_message = reject_message
        await self._persist(mentoring_log)

        self._after_commit(self._respond_to_cadet(mentoring_log.id, MailType.CANCEL_TO_CADET))
        logger.info(f"MentoringLog Rejected: {mentoring_log.id}")
        return mentoring_log

    async def complete(self, mentoring_log_id: str) -> MentoringLog:
        """
        confirmed → done. 외부(운영진/배치)의 진행 완료 신호로 호출된다.

        Raises:
            InvalidTransition: confirmed 상태가 아닌 경우
        """
        mentoring_log = await self.get_log(mentoring_log_id)
        ensure_transition(mentoring_log.status, MentoringLogStatus.DONE)

        mentoring_log.status = MentoringLogStatus.DONE
        await self._persist(mentoring_log)
        logger.info(f"MentoringLog Done: {mentoring_log.id}")
        return mentoring_log

    # ============================================================
    # Internal
    # ============================================================

    async def _get_owned_log(self, mentoring_log_id: str, mentor_intra_id: str) -> MentoringLog:
        mentoring_log = await self.get_log(mentoring_log_id)
        mentor = await self.user_service.get_mentor(mentor_intra_id)
        if mentoring_log.mentor_id != mentor.id:
            raise Forbidden("해당 멘토링을 수정할 수 있는 권한이 없습니다")
        return mentoring_log

    def _respond_to_cadet(self, mentoring_log_id: str, mail_type: MailType) -> Callable[[], None]:
        def _on_commit() -> None:
            self.scheduler.cancel_auto_cancel(mentoring_log_id)
            self.notifier.send(mentoring_log_id, mail_type)

        return _on_commit

    def _after_commit(self, action: Callable[[], None]) -> None:
        """
        요청 세션이 커밋된 뒤에 action을 실행한다.

        커밋 전에 실패하거나 롤백되면 메일/타이머 부수효과는 일어나지 않는다.
        리스너는 다음 커밋 1회에만 반응한다.
        """
        event.listen(self.repository.session.sync_session, "after_commit", lambda _session: action(), once=True)

    async def _persist(self, mentoring_log: MentoringLog) -> None:
        try:
            await self.repository.save(mentoring_log)
        except StaleEntity as e:
            raise Conflict("다른 요청이 먼저 멘토링 상태를 변경했습니다. 다시 시도해 주세요") from e
        except RepositoryError as e:
            raise Conflict(f"{e} 저장중 예기치 못한 에러가 발생하였습니다") from e
