"""
멘토링 로그 상태 전이 규칙

    waiting ──확정──▶ confirmed ──완료──▶ done
       │
       ├──거절──▶ rejected
       └──기한초과──▶ auto-cancelled

rejected, auto-cancelled, done은 종료 상태다.
"""

from backend.src.common.enums import MentoringLogStatus
from backend.src.common.exceptions import InvalidTransition


TRANSITIONS: dict[MentoringLogStatus, frozenset[MentoringLogStatus]] = {
    MentoringLogStatus.WAITING: frozenset(
        {MentoringLogStatus.CONFIRMED, MentoringLogStatus.REJECTED, MentoringLogStatus.AUTO_CANCELLED}
    ),
    MentoringLogStatus.CONFIRMED: frozenset({MentoringLogStatus.DONE}),
    MentoringLogStatus.REJECTED: frozenset(),
    MentoringLogStatus.AUTO_CANCELLED: frozenset(),
    MentoringLogStatus.DONE: frozenset(),
}


def can_transition(current: MentoringLogStatus, target: MentoringLogStatus) -> bool:
    return MentoringLogStatus(target) in TRANSITIONS[MentoringLogStatus(current)]


def ensure_transition(current: MentoringLogStatus, target: MentoringLogStatus) -> None:
    """허용되지 않는 전이면 InvalidTransition을 던진다."""
    if not can_transition(current, target):
        raise InvalidTransition(f"멘토링 상태를 '{current}'에서 '{target}'(으)로 변경할 수 없습니다")


def is_terminal(status: MentoringLogStatus) -> bool:
    return not TRANSITIONS[MentoringLogStatus(status)]
