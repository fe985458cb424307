"""Leaderboards aggregated from player stats and completed quests.

Overall ranks by lifetime bricks. Period boards rank by XP earned from quests
completed in the period. Results are cached in Redis as JSON for a short TTL
when a Redis client is available.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError
from sqlalchemy import func, select

from dotlife.config import get_settings
from dotlife.db.models import DailyQuest, PlayerStats, Profile
from dotlife.leaderboards.periods import Period, period_key, period_range

if TYPE_CHECKING:
    from redis.asyncio import Redis
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

AROUND_ME_TOP = 10


def build_cache_key(period: Period, today: date, limit: int | None) -> str:
    """Build the Redis key for a cached leaderboard page."""
    return f"leaderboard:{period.value}:{period_key(period, today)}:{limit if limit is not None else 'all'}"


def assign_ranks(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Number rows 1..n in their current order."""
    return [{**row, "rank": i} for i, row in enumerate(rows, start=1)]


async def _overall_rows(db: AsyncSession, limit: int | None) -> list[dict[str, Any]]:
    stmt = (
        select(
            Profile.profile_id,
            Profile.username,
            Profile.name,
            Profile.avatar,
            PlayerStats.level,
            PlayerStats.total_xp,
            PlayerStats.total_bricks,
        )
        .join(PlayerStats, PlayerStats.profile_id == Profile.profile_id)
        .order_by(
            PlayerStats.total_bricks.desc(),
            PlayerStats.total_xp.desc(),
            Profile.username.asc(),
        )
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [
        {
            "profile_id": row.profile_id,
            "username": row.username,
            "name": row.name,
            "avatar": row.avatar,
            "level": row.level,
            "xp": row.total_xp,
            "bricks": row.total_bricks,
            "quests_completed": None,
        }
        for row in result
    ]


async def _period_rows(
    db: AsyncSession, period: Period, today: date, limit: int | None,
) -> list[dict[str, Any]]:
    first, last = period_range(period, today)
    xp = func.sum(DailyQuest.reward_xp).label("xp")
    bricks = func.sum(DailyQuest.reward_bricks).label("bricks")
    quests = func.count(DailyQuest.quest_id).label("quests_completed")
    stmt = (
        select(
            Profile.profile_id,
            Profile.username,
            Profile.name,
            Profile.avatar,
            PlayerStats.level,
            xp,
            bricks,
            quests,
        )
        .join(DailyQuest, DailyQuest.profile_id == Profile.profile_id)
        .join(PlayerStats, PlayerStats.profile_id == Profile.profile_id)
        .where(
            DailyQuest.completed.is_(True),
            DailyQuest.quest_date >= first,
            DailyQuest.quest_date <= last,
        )
        .group_by(
            Profile.profile_id,
            Profile.username,
            Profile.name,
            Profile.avatar,
            PlayerStats.level,
        )
        .order_by(xp.desc(), quests.desc(), Profile.username.asc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [
        {
            "profile_id": row.profile_id,
            "username": row.username,
            "name": row.name,
            "avatar": row.avatar,
            "level": row.level,
            "xp": int(row.xp or 0),
            "bricks": int(row.bricks or 0),
            "quests_completed": int(row.quests_completed),
        }
        for row in result
    ]


async def _read_cache(redis: Redis | None, key: str) -> list[dict[str, Any]] | None:
    if redis is None:
        return None
    try:
        raw = await redis.get(key)
    except RedisError:
        logger.warning("Leaderboard cache read failed for %s", key, exc_info=True)
        return None
    if raw is None:
        return None
    return json.loads(raw)


async def _write_cache(redis: Redis | None, key: str, entries: list[dict[str, Any]]) -> None:
    if redis is None:
        return
    ttl = get_settings().leaderboard_cache_ttl_seconds
    try:
        await redis.set(key, json.dumps(entries), ex=ttl)
    except RedisError:
        logger.warning("Leaderboard cache write failed for %s", key, exc_info=True)


async def get_leaderboard(
    db: AsyncSession,
    period: Period,
    today: date,
    *,
    limit: int | None = None,
    redis: Redis | None = None,
) -> list[dict[str, Any]]:
    """Ranked entries for a period. ``limit=None`` returns every ranked profile."""
    key = build_cache_key(period, today, limit)
    cached = await _read_cache(redis, key)
    if cached is not None:
        return cached

    if period is Period.OVERALL:
        rows = await _overall_rows(db, limit)
    else:
        rows = await _period_rows(db, period, today, limit)
    entries = assign_ranks(rows)

    await _write_cache(redis, key, entries)
    return entries


def split_around_me(
    entries: list[dict[str, Any]], profile_id: str, top: int = AROUND_ME_TOP,
) -> tuple[list[dict[str, Any]], dict[str, Any] | None]:
    """Return the top ``top`` entries plus the caller's own entry when it falls outside them."""
    head = entries[:top]
    if any(e["profile_id"] == profile_id for e in head):
        return head, None
    me = next((e for e in entries[top:] if e["profile_id"] == profile_id), None)
    return head, me


async def around_me(
    db: AsyncSession,
    period: Period,
    today: date,
    profile_id: str,
    *,
    redis: Redis | None = None,
) -> dict[str, Any]:
    """Top 10 plus the caller's row (if ranked and outside the top 10)."""
    entries = await get_leaderboard(db, period, today, limit=None, redis=redis)
    top, me = split_around_me(entries, profile_id)
    return {"top": top, "me": me, "total": len(entries)}
