"""Rank assignment, around-me selection and the Redis cache path."""

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from dotlife.leaderboards.periods import Period
from dotlife.leaderboards.service import (
    assign_ranks,
    build_cache_key,
    get_leaderboard,
    split_around_me,
)

TODAY = date(2026, 3, 4)


def _rows(n: int) -> list[dict]:
    return [{"profile_id": f"p{i}", "xp": 100 - i} for i in range(n)]


class TestAssignRanks:
    def test_ranks_are_one_based_in_order(self):
        ranked = assign_ranks(_rows(3))
        assert [r["rank"] for r in ranked] == [1, 2, 3]
        assert ranked[0]["profile_id"] == "p0"

    def test_empty(self):
        assert assign_ranks([]) == []


class TestAroundMe:
    def test_user_inside_top_ten(self):
        top, me = split_around_me(assign_ranks(_rows(15)), "p3")
        assert len(top) == 10
        assert me is None

    def test_user_outside_top_ten(self):
        top, me = split_around_me(assign_ranks(_rows(15)), "p12")
        assert len(top) == 10
        assert me is not None
        assert me["rank"] == 13

    def test_unranked_user(self):
        top, me = split_around_me(assign_ranks(_rows(5)), "nobody")
        assert len(top) == 5
        assert me is None


class TestCache:
    def test_cache_key_includes_period_instance(self):
        assert build_cache_key(Period.WEEKLY, TODAY, 50) == "leaderboard:weekly:2026-W10:50"
        assert build_cache_key(Period.OVERALL, TODAY, None) == "leaderboard:overall:all:all"

    async def test_cache_hit_skips_database(self):
        cached = [{"rank": 1, "profile_id": "p0"}]
        redis = MagicMock()
        redis.get = AsyncMock(return_value=json.dumps(cached))
        db = MagicMock()
        db.execute = AsyncMock()

        result = await get_leaderboard(db, Period.DAILY, TODAY, limit=50, redis=redis)

        assert result == cached
        db.execute.assert_not_awaited()

    async def test_redis_failure_falls_back_to_database(self):
        redis = MagicMock()
        redis.get = AsyncMock(side_effect=RedisConnectionError("down"))
        redis.set = AsyncMock(side_effect=RedisConnectionError("down"))
        result_proxy = MagicMock()
        result_proxy.__iter__.return_value = iter([])
        db = MagicMock()
        db.execute = AsyncMock(return_value=result_proxy)

        result = await get_leaderboard(db, Period.OVERALL, TODAY, limit=50, redis=redis)

        assert result == []
        db.execute.assert_awaited_once()
