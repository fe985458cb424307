"""Player stats access and reward accounting."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dotlife.db.models import PlayerStats
from dotlife.errors import NotFoundError
from dotlife.quests.levels import compute_level

logger = logging.getLogger(__name__)


async def get_player_stats(
    db: AsyncSession,
    profile_id: str,
    *,
    for_update: bool = False,
) -> PlayerStats:
    """Load a profile's stats row, optionally locking it for the rest of the transaction."""
    stmt = select(PlayerStats).where(PlayerStats.profile_id == profile_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    stats = result.scalar_one_or_none()
    if stats is None:
        raise NotFoundError("Player stats", profile_id)
    return stats


def apply_streak(stats: PlayerStats, day: date) -> None:
    """Advance the consecutive-day streak for a completion on ``day``."""
    last = stats.last_completed_date
    if last == day:
        return
    if last is not None and last == day - timedelta(days=1):
        stats.consecutive_days += 1
    else:
        stats.consecutive_days = 1
    stats.last_completed_date = day


def grant_reward(stats: PlayerStats, xp: int, bricks: int, day: date) -> bool:
    """Credit a completed quest's XP and bricks. Returns True on level up.

    Bricks are added to both available and total so that
    available_bricks + bricks_placed == total_bricks keeps holding.
    """
    old_level = stats.level

    stats.total_xp += xp
    level_info = compute_level(stats.total_xp)
    stats.level = level_info["level"]
    stats.current_xp = level_info["current_xp"]
    stats.xp_to_next_level = level_info["xp_to_next_level"]

    stats.total_bricks += bricks
    stats.available_bricks += bricks

    apply_streak(stats, day)

    if stats.level > old_level:
        logger.info("Profile %s levelled up: %d -> %d", stats.profile_id, old_level, stats.level)
        return True
    return False
