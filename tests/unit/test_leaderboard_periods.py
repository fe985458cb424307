"""Leaderboard period boundaries: ISO weeks, months, years."""

from datetime import date

import pytest

from dotlife.leaderboards.periods import Period, get_monday, period_key, period_range


class TestPeriodRange:
    def test_daily(self):
        d = date(2026, 3, 4)
        assert period_range(Period.DAILY, d) == (d, d)

    def test_weekly_is_monday_to_sunday(self):
        # Wednesday 2026-03-04
        assert period_range(Period.WEEKLY, date(2026, 3, 4)) == (date(2026, 3, 2), date(2026, 3, 8))

    def test_weekly_on_sunday_stays_in_same_week(self):
        assert period_range(Period.WEEKLY, date(2026, 3, 8))[0] == date(2026, 3, 2)

    def test_weekly_across_year_boundary(self):
        # Thursday 2026-01-01 belongs to the week starting Monday 2025-12-29
        assert period_range(Period.WEEKLY, date(2026, 1, 1)) == (date(2025, 12, 29), date(2026, 1, 4))

    def test_monthly_february_leap_year(self):
        assert period_range(Period.MONTHLY, date(2028, 2, 10)) == (date(2028, 2, 1), date(2028, 2, 29))

    def test_yearly(self):
        assert period_range(Period.YEARLY, date(2026, 7, 1)) == (date(2026, 1, 1), date(2026, 12, 31))

    def test_overall_has_no_range(self):
        with pytest.raises(ValueError):
            period_range(Period.OVERALL, date(2026, 7, 1))

    def test_get_monday_on_monday(self):
        assert get_monday(date(2026, 3, 2)) == date(2026, 3, 2)


class TestPeriodKey:
    def test_iso_week_key_uses_iso_year(self):
        assert period_key(Period.WEEKLY, date(2026, 1, 1)) == "2026-W01"

    def test_week_key_late_december(self):
        assert period_key(Period.WEEKLY, date(2024, 12, 30)) == "2025-W01"

    def test_monthly_key(self):
        assert period_key(Period.MONTHLY, date(2026, 3, 4)) == "2026-03"

    def test_overall_key(self):
        assert period_key(Period.OVERALL, date(2026, 3, 4)) == "all"
