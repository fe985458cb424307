"""Consecutive-day streak and reward crediting on a detached stats row."""

from datetime import date

from dotlife.db.models import PlayerStats
from dotlife.quests.stats_service import apply_streak, grant_reward

MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)
THURSDAY = date(2026, 3, 5)


def _stats(**overrides) -> PlayerStats:
    values = {
        "profile_id": "p1",
        "level": 1,
        "total_xp": 0,
        "current_xp": 0,
        "xp_to_next_level": 100,
        "consecutive_days": 0,
        "last_completed_date": None,
        "total_bricks": 20,
        "available_bricks": 20,
        "bricks_placed": 0,
    }
    values.update(overrides)
    return PlayerStats(**values)


class TestStreak:
    def test_first_completion_starts_streak(self):
        stats = _stats()
        apply_streak(stats, MONDAY)
        assert stats.consecutive_days == 1
        assert stats.last_completed_date == MONDAY

    def test_same_day_unchanged(self):
        stats = _stats(consecutive_days=3, last_completed_date=MONDAY)
        apply_streak(stats, MONDAY)
        assert stats.consecutive_days == 3

    def test_next_day_increments(self):
        stats = _stats(consecutive_days=3, last_completed_date=MONDAY)
        apply_streak(stats, TUESDAY)
        assert stats.consecutive_days == 4

    def test_gap_resets_to_one(self):
        stats = _stats(consecutive_days=3, last_completed_date=MONDAY)
        apply_streak(stats, THURSDAY)
        assert stats.consecutive_days == 1
        assert stats.last_completed_date == THURSDAY


class TestGrantReward:
    def test_bricks_added_to_total_and_available(self):
        stats = _stats(total_bricks=25, available_bricks=20, bricks_placed=5)
        grant_reward(stats, 30, 3, MONDAY)
        assert stats.total_bricks == 28
        assert stats.available_bricks == 23
        assert stats.available_bricks + stats.bricks_placed == stats.total_bricks

    def test_level_up_reported(self):
        stats = _stats(total_xp=90)
        assert grant_reward(stats, 10, 1, MONDAY) is True
        assert stats.level == 2
        assert stats.xp_to_next_level == 250

    def test_no_level_up(self):
        stats = _stats()
        assert grant_reward(stats, 10, 1, MONDAY) is False
        assert stats.current_xp == 10
