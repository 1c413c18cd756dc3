"""
멘토 정산 시간 계산

규칙:
    - 세션 시간 = floor((종료 - 시작) 시간)
    - 같은 날 완료된 다른 멘토링 합계가 일 상한(4시간) 이상이면 0, 넘치면 상한까지만 인정
    - 같은 달 합계가 월 상한(10시간) 이상이면 0, 넘치면 상한까지만 인정
    - 정산 금액 = 인정 시간 × 시간당 금액

일/월 판단은 서비스 타임존 기준이다. naive datetime은 이미 현지 시각으로 간주한다.
"""

import math
from collections.abc import Iterable
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from backend.src.common.config import COMPENSATION_CONFIG, MENTORING_CONFIG


MeetingWindow = tuple[datetime, datetime]

SERVICE_TZ = ZoneInfo(MENTORING_CONFIG["timezone"])


def meeting_hours(start: datetime, end: datetime) -> int:
    """세션 길이를 시간 단위로 내림한다 (음수는 0)."""
    return max(math.floor((end - start).total_seconds() / 3600), 0)


def to_local(value: datetime, tz: tzinfo = SERVICE_TZ) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(tz)


def calculate_total_hour(
    start: datetime,
    end: datetime,
    finished_meetings: Iterable[MeetingWindow],
    *,
    daily_cap: int | None = None,
    monthly_cap: int | None = None,
    tz: tzinfo = SERVICE_TZ,
) -> int:
    """
    이번 세션에서 정산 대상으로 인정되는 시간을 계산한다.

    Args:
        start: 확정된 미팅 시작 시각
        end: 확정된 미팅 종료 시각
        finished_meetings: 같은 멘토의 다른 완료 멘토링 (시작, 종료) 목록
        daily_cap: 일 상한 (기본값: COMPENSATION_CONFIG)
        monthly_cap: 월 상한 (기본값: COMPENSATION_CONFIG)

    Returns:
        인정 시간 (0 이상 정수)
    """
    daily_cap = COMPENSATION_CONFIG["daily_cap_hours"] if daily_cap is None else daily_cap
    monthly_cap = COMPENSATION_CONFIG["monthly_cap_hours"] if monthly_cap is None else monthly_cap

    result = meeting_hours(start, end)
    local_start = to_local(start, tz)

    in_month: list[MeetingWindow] = []
    for meeting in finished_meetings:
        meeting_start = to_local(meeting[0], tz)
        if (meeting_start.year, meeting_start.month) == (local_start.year, local_start.month):
            in_month.append(meeting)

    # 일 단위는 월 단위 결과에서 다시 거른다
    in_day = [m for m in in_month if to_local(m[0], tz).day == local_start.day]

    hours_per_day = sum(meeting_hours(s, e) for s, e in in_day)
    if hours_per_day >= daily_cap:
        return 0
    if hours_per_day + result >= daily_cap:
        result = daily_cap - hours_per_day

    hours_per_month = sum(meeting_hours(s, e) for s, e in in_month)
    if hours_per_month >= monthly_cap:
        return 0
    if hours_per_month + result >= monthly_cap:
        result = monthly_cap - hours_per_month

    return result


def calculate_money(hours: int, money_per_hour: int | None = None) -> int:
    money_per_hour = COMPENSATION_CONFIG["money_per_hour"] if money_per_hour is None else money_per_hour
    return hours * money_per_hour
