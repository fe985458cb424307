"""Daily quest lifecycle: draft, confirm, complete.

A profile's quests for a day are editable until the day's list is confirmed.
Only confirmed quests can be completed, and only before their deadline.
Completion credits XP and bricks to ``player_stats`` and folds the result
into the day's ``quest_history`` row.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from dotlife.config import get_settings
from dotlife.db.models import DailyQuest, QuestHistory
from dotlife.errors import EmptyBatchError, NotFoundError, QuestStateError
from dotlife.quests.levels import rewards_for
from dotlife.quests.stats_service import get_player_stats, grant_reward

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)


def _now(now: datetime | None) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


async def _quests_for_day(db: AsyncSession, profile_id: str, day: date) -> list[DailyQuest]:
    result = await db.execute(
        select(DailyQuest)
        .where(DailyQuest.profile_id == profile_id, DailyQuest.quest_date == day)
        .order_by(DailyQuest.quest_id.asc())
    )
    return list(result.scalars().all())


async def _get_own_quest(db: AsyncSession, profile_id: str, quest_id: int) -> DailyQuest:
    result = await db.execute(
        select(DailyQuest).where(DailyQuest.quest_id == quest_id, DailyQuest.profile_id == profile_id)
    )
    quest = result.scalar_one_or_none()
    if quest is None:
        raise NotFoundError("Quest", quest_id)
    return quest


def _require_editable(quest: DailyQuest) -> None:
    if quest.confirmed:
        msg = "Quest list is already confirmed"
        raise QuestStateError(msg)


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


async def create_quest(
    db: AsyncSession,
    profile_id: str,
    title: str,
    description: str = "",
    difficulty: str = "easy",
    *,
    now: datetime | None = None,
) -> DailyQuest:
    """
    Add a quest to today's list.

    Raises:
        QuestStateError: If today's list is already confirmed.
        ValueError: If the difficulty is unknown.
    """
    now = _now(now)
    today = now.date()
    existing = await _quests_for_day(db, profile_id, today)
    if any(q.confirmed for q in existing):
        msg = "Today's quests are already confirmed"
        raise QuestStateError(msg)

    rewards = rewards_for(difficulty)
    quest = DailyQuest(
        profile_id=profile_id,
        title=title,
        description=description,
        difficulty=difficulty,
        reward_xp=rewards["xp"],
        reward_bricks=rewards["bricks"],
        completed=False,
        confirmed=False,
        quest_date=today,
        deadline=end_of_day(today),
    )
    db.add(quest)
    await db.flush()
    return quest


async def update_quest(
    db: AsyncSession,
    profile_id: str,
    quest_id: int,
    title: str | None = None,
    description: str | None = None,
    difficulty: str | None = None,
) -> DailyQuest:
    """Edit an unconfirmed quest. Changing difficulty recomputes its rewards."""
    quest = await _get_own_quest(db, profile_id, quest_id)
    _require_editable(quest)

    if title is not None:
        quest.title = title
    if description is not None:
        quest.description = description
    if difficulty is not None:
        rewards = rewards_for(difficulty)
        quest.difficulty = difficulty
        quest.reward_xp = rewards["xp"]
        quest.reward_bricks = rewards["bricks"]
    await db.flush()
    return quest


async def delete_quest(db: AsyncSession, profile_id: str, quest_id: int) -> None:
    """Delete an unconfirmed quest."""
    quest = await _get_own_quest(db, profile_id, quest_id)
    _require_editable(quest)
    await db.delete(quest)
    await db.flush()


async def confirm_quests(
    db: AsyncSession,
    profile_id: str,
    *,
    now: datetime | None = None,
) -> list[DailyQuest]:
    """
    Lock today's quest list so its quests can be completed.

    Raises:
        EmptyBatchError: If there are no quests today.
        QuestStateError: If the list is already confirmed.
    """
    now = _now(now)
    today = now.date()
    quests = await _quests_for_day(db, profile_id, today)
    if not quests:
        msg = "No quests to confirm"
        raise EmptyBatchError(msg)
    if all(q.confirmed for q in quests):
        msg = "Today's quests are already confirmed"
        raise QuestStateError(msg)

    for quest in quests:
        quest.confirmed = True

    history = await _get_or_create_history(db, profile_id, today)
    history.total_quests = len(quests)
    history.perfect_day = False
    await db.flush()

    logger.info("quests_confirmed", profile_id=profile_id, quest_date=today.isoformat(), count=len(quests))
    return quests


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


async def _get_or_create_history(db: AsyncSession, profile_id: str, day: date) -> QuestHistory:
    result = await db.execute(
        select(QuestHistory).where(
            QuestHistory.profile_id == profile_id,
            QuestHistory.completion_date == day,
        )
    )
    history = result.scalar_one_or_none()
    if history is None:
        history = QuestHistory(
            profile_id=profile_id,
            completion_date=day,
            total_quests=0,
            completed_quests=0,
            total_bricks_earned=0,
            total_xp_earned=0,
            perfect_day=False,
        )
        db.add(history)
    return history


async def complete_quest(
    db: AsyncSession,
    profile_id: str,
    quest_id: int,
    *,
    now: datetime | None = None,
) -> dict:
    """
    Mark a quest completed and credit its rewards.

    Returns:
        Dict with the quest, the updated stats and a ``level_up`` flag.

    Raises:
        NotFoundError: If the quest does not exist for this profile.
        QuestStateError: If the quest is unconfirmed, already completed or past its deadline.
    """
    now = _now(now)
    stats = await get_player_stats(db, profile_id, for_update=True)
    quest = await _get_own_quest(db, profile_id, quest_id)

    if not quest.confirmed:
        msg = "Quest must be confirmed before it can be completed"
        raise QuestStateError(msg)
    if quest.completed:
        msg = "Quest is already completed"
        raise QuestStateError(msg)
    if now > as_utc(quest.deadline):
        msg = "Quest deadline has passed"
        raise QuestStateError(msg)

    quest.completed = True
    quest.completed_at = now
    level_up = grant_reward(stats, quest.reward_xp, quest.reward_bricks, now.date())

    day_quests = await _quests_for_day(db, profile_id, quest.quest_date)
    completed_count = sum(1 for q in day_quests if q.completed)
    history = await _get_or_create_history(db, profile_id, quest.quest_date)
    history.total_quests = len(day_quests)
    history.completed_quests = completed_count
    history.total_bricks_earned += quest.reward_bricks
    history.total_xp_earned += quest.reward_xp
    history.perfect_day = completed_count == len(day_quests)
    await db.flush()

    logger.info(
        "quest_completed",
        profile_id=profile_id,
        quest_id=quest.quest_id,
        reward_xp=quest.reward_xp,
        reward_bricks=quest.reward_bricks,
        level=stats.level,
    )
    return {"quest": quest, "stats": stats, "level_up": level_up}


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def list_today(db: AsyncSession, profile_id: str, *, now: datetime | None = None) -> list[DailyQuest]:
    return await _quests_for_day(db, profile_id, _now(now).date())


async def daily_summary(db: AsyncSession, profile_id: str, *, now: datetime | None = None) -> dict:
    """Counts for today's list."""
    today = _now(now).date()
    quests = await _quests_for_day(db, profile_id, today)
    completed = sum(1 for q in quests if q.completed)
    return {
        "date": today,
        "total": len(quests),
        "completed": completed,
        "all_completed": bool(quests) and completed == len(quests),
        "all_confirmed": bool(quests) and all(q.confirmed for q in quests),
    }


async def get_history(
    db: AsyncSession,
    profile_id: str,
    days: int | None = None,
    *,
    now: datetime | None = None,
) -> list[QuestHistory]:
    """Per-day summaries for the last ``days`` days, newest first."""
    if days is None:
        days = get_settings().quest_history_days
    since = _now(now).date() - timedelta(days=days - 1)
    result = await db.execute(
        select(QuestHistory)
        .where(QuestHistory.profile_id == profile_id, QuestHistory.completion_date >= since)
        .order_by(QuestHistory.completion_date.desc())
    )
    return list(result.scalars().all())
