"""
정산 시간 계산 단위 테스트 (DB 없이 순수 함수만 검증)
"""

from datetime import datetime, timedelta, timezone

import pytest

from backend.src.report.compensation import calculate_money, calculate_total_hour, meeting_hours


def _window(day: int, hour: int, hours: float, month: int = 10, year: int = 2026):
    start = datetime(year, month, day, hour, 0)
    return start, start + timedelta(hours=hours)


class TestMeetingHours:
    @pytest.mark.parametrize(
        "hours, expected",
        [(1, 1), (2.5, 2), (3.99, 3), (0.5, 0)],
    )
    def test_floor(self, hours, expected):
        assert meeting_hours(*_window(20, 10, hours)) == expected

    def test_negative_is_zero(self):
        start, end = _window(20, 10, 2)
        assert meeting_hours(end, start) == 0


class TestCalculateTotalHour:
    def test_no_other_meetings(self):
        assert calculate_total_hour(*_window(20, 19, 2), []) == 2

    def test_three_hour_session_without_history(self):
        hours = calculate_total_hour(*_window(20, 19, 3), [])
        assert calculate_money(hours) == 300_000

    def test_session_longer_than_daily_cap(self):
        assert calculate_total_hour(*_window(20, 10, 6), []) == 4

    def test_daily_cap_partially_used(self):
        """같은 날 3시간이 이미 있으면 1시간만 인정."""
        finished = [_window(20, 10, 3)]
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 1

    def test_fractional_hours_are_floored_before_cap(self):
        """3.5시간 기록은 3시간으로 집계된다."""
        finished = [_window(20, 10, 3.5)]
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 1

    def test_daily_cap_exhausted(self):
        finished = [_window(20, 9, 2), _window(20, 13, 2)]
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 0

    def test_other_days_do_not_count_toward_daily_cap(self):
        finished = [_window(19, 10, 3), _window(21, 10, 3)]
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 2

    def test_monthly_cap_partially_used(self):
        finished = [_window(d, 10, 3) for d in (1, 2, 3)]
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 1

    def test_monthly_cap_exhausted(self):
        finished = [_window(d, 10, 2) for d in (1, 2, 3, 4, 5)]
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 0

    def test_monthly_cap_uses_month_total(self):
        """월 상한은 같은 날 합계가 아닌 월 합계로 계산한다."""
        finished = [_window(20, 9, 1), *[_window(d, 10, 2) for d in (1, 2, 3, 4)]]
        # 일: 1 + 2 < 4, 월: 9 + 2 > 10 → 1시간
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 1

    def test_same_month_of_other_year_is_ignored(self):
        finished = [_window(20, 10, 3, year=2025)]
        assert calculate_total_hour(*_window(20, 19, 2), finished) == 2

    def test_aware_datetimes_use_service_timezone(self):
        """UTC 15:00은 서울 기준 다음날 00:00이므로 다른 날로 본다."""
        utc = timezone.utc
        finished = [(datetime(2026, 10, 20, 15, 0, tzinfo=utc), datetime(2026, 10, 20, 18, 0, tzinfo=utc))]
        kst = timezone(timedelta(hours=9))
        start = datetime(2026, 10, 20, 19, 0, tzinfo=kst)

        assert calculate_total_hour(start, start + timedelta(hours=2), finished) == 2

    def test_custom_caps(self):
        finished = [_window(20, 10, 1)]
        assert calculate_total_hour(*_window(20, 19, 3), finished, daily_cap=2, monthly_cap=10) == 1


class TestCalculateMoney:
    def test_default_rate(self):
        assert calculate_money(2) == 200_000

    def test_zero_hours(self):
        assert calculate_money(0) == 0

    def test_custom_rate(self):
        assert calculate_money(3, money_per_hour=50_000) == 150_000
