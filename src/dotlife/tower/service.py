"""Tower persistence: drafts, confirm/reset protocol, stats and history.

Drafts live in ``tower_blocks`` with ``is_confirmed = False`` and form a
single workspace per profile; saving a drawing replaces them. Confirming
charges one brick per draft. All writes happen in the caller's transaction,
and every entry point that moves bricks locks the profile's
``player_stats`` row first.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, select, update

from dotlife.config import get_settings
from dotlife.db.models import (
    DailyQuest,
    TowerBlock,
    TowerBuildingSession,
    TowerHistory,
    TowerStats,
)
from dotlife.errors import ConflictError, EmptyBatchError, InsufficientBricksError
from dotlife.quests.stats_service import get_player_stats
from dotlife.tower.grid import Block, PlacementMode, TowerGrid, confirm_batch, tower_dimensions

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from dotlife.db.models import PlayerStats
    from dotlife.tower.schemas import BlockIn

logger = structlog.get_logger()


@dataclass(frozen=True)
class DraftInput:
    x: int
    y: int
    color: str
    build_date: date | None = None

    @classmethod
    def from_schema(cls, block: BlockIn) -> DraftInput:
        return cls(x=block.x, y=block.y, color=block.color, build_date=block.date)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_block(row: TowerBlock) -> Block:
    return Block(
        x=row.x_position,
        y=row.y_position,
        color=row.color,
        build_date=row.build_date,
        confirmed=row.is_confirmed,
    )


def block_to_dict(block: Block) -> dict:
    return {
        "x": block.x,
        "y": block.y,
        "color": block.color,
        "date": block.build_date,
        "saved": block.confirmed,
    }


def _new_grid(blocks: list[Block], available_bricks: int) -> TowerGrid:
    settings = get_settings()
    return TowerGrid.from_blocks(
        blocks,
        available_bricks=available_bricks,
        width=settings.grid_width,
        height=settings.grid_height,
        mode=PlacementMode(settings.tower_mode),
    )


async def _load_rows(db: AsyncSession, profile_id: str, *, confirmed: bool | None = None) -> list[TowerBlock]:
    stmt = select(TowerBlock).where(TowerBlock.profile_id == profile_id)
    if confirmed is not None:
        stmt = stmt.where(TowerBlock.is_confirmed.is_(confirmed))
    result = await db.execute(stmt.order_by(TowerBlock.created_at.asc(), TowerBlock.block_id.asc()))
    return list(result.scalars().all())


def _check_session_owner(session: TowerBuildingSession | None, profile_id: str) -> None:
    if session is not None and session.profile_id != profile_id:
        msg = "Building session belongs to another profile"
        raise ConflictError(msg)


async def _upsert_session(
    db: AsyncSession,
    profile_id: str,
    session_id: str,
    drafts: list[Block],
) -> TowerBuildingSession:
    session = await db.get(TowerBuildingSession, session_id)
    _check_session_owner(session, profile_id)
    blocks_data = [
        {"x": b.x, "y": b.y, "color": b.color, "date": b.build_date.isoformat()}
        for b in drafts
    ]
    if session is None:
        session = TowerBuildingSession(
            session_id=session_id,
            profile_id=profile_id,
            blocks_data=blocks_data,
        )
        db.add(session)
    else:
        session.blocks_data = blocks_data
    return session


async def _record_history(
    db: AsyncSession, profile_id: str, action_type: str, blocks_changed: int, now: datetime,
) -> None:
    db.add(TowerHistory(
        profile_id=profile_id,
        action_type=action_type,
        blocks_changed=blocks_changed,
        created_at=now,
    ))


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def load_tower(db: AsyncSession, profile_id: str) -> dict:
    """All blocks (drafts flagged unsaved), stats and brick budget for a profile."""
    settings = get_settings()
    player = await get_player_stats(db, profile_id)
    rows = await _load_rows(db, profile_id)
    tower_stats = await db.get(TowerStats, profile_id)

    drafts = sum(1 for r in rows if not r.is_confirmed)
    return {
        "blocks": [block_to_dict(_to_block(r)) for r in rows],
        "stats": tower_stats,
        "available_bricks": player.available_bricks,
        "total_bricks": player.total_bricks,
        "bricks_placed": player.bricks_placed,
        "remaining_blocks": max(0, player.available_bricks - drafts),
        "grid_width": settings.grid_width,
        "grid_height": settings.grid_height,
        "mode": settings.tower_mode,
    }


async def get_history(db: AsyncSession, profile_id: str, limit: int | None = None) -> list[TowerHistory]:
    """Most recent confirm/reset entries, newest first."""
    if limit is None:
        limit = get_settings().tower_history_limit
    result = await db.execute(
        select(TowerHistory)
        .where(TowerHistory.profile_id == profile_id)
        .order_by(TowerHistory.created_at.desc(), TowerHistory.history_id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def load_calendar(db: AsyncSession, profile_id: str, year: int, month: int) -> list[dict]:
    """One calendar event per quest in the month."""
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    result = await db.execute(
        select(DailyQuest)
        .where(
            DailyQuest.profile_id == profile_id,
            DailyQuest.quest_date >= first,
            DailyQuest.quest_date <= last,
        )
        .order_by(DailyQuest.quest_date.asc(), DailyQuest.quest_id.asc())
    )
    return [
        {
            "event_date": q.quest_date,
            "quest_id": q.quest_id,
            "quest_title": q.title,
            "completed": q.completed,
            "blocks_added": q.reward_bricks if q.completed else 0,
        }
        for q in result.scalars()
    ]


async def load_date_details(db: AsyncSession, profile_id: str, day: date) -> dict:
    """Confirmed blocks and quests for a single day."""
    blocks_result = await db.execute(
        select(TowerBlock).where(
            TowerBlock.profile_id == profile_id,
            TowerBlock.build_date == day,
            TowerBlock.is_confirmed.is_(True),
        )
    )
    blocks = blocks_result.scalars().all()

    quests_result = await db.execute(
        select(DailyQuest)
        .where(DailyQuest.profile_id == profile_id, DailyQuest.quest_date == day)
        .order_by(DailyQuest.quest_id.asc())
    )
    return {
        "date": day,
        "blocks_added": len(blocks),
        "quests": [
            {
                "id": str(q.quest_id),
                "title": q.title,
                "completed": q.completed,
                "difficulty": q.difficulty,
                "reward": q.reward_bricks,
            }
            for q in quests_result.scalars()
        ],
        "colors_used": [b.color for b in blocks],
    }


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


async def save_drafts(
    db: AsyncSession,
    profile_id: str,
    session_id: str,
    blocks: list[DraftInput],
    *,
    now: datetime | None = None,
) -> tuple[list[Block], int]:
    """Replace the profile's drafts with a client drawing.

    Blocks that repeat an already confirmed block (same cell and color) are
    skipped. The rest go through the placement rules as one drawing, so
    they may be submitted in any order.
    Returns the stored drafts and the bricks still unallocated.

    Raises:
        InvalidPlacementError: a block is out of bounds, on an occupied cell or unsupported.
        InsufficientBricksError: more drafts than available bricks.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    player = await get_player_stats(db, profile_id, for_update=True)

    await db.execute(
        delete(TowerBlock).where(
            TowerBlock.profile_id == profile_id,
            TowerBlock.is_confirmed.is_(False),
        )
    )
    confirmed = [_to_block(r) for r in await _load_rows(db, profile_id, confirmed=True)]
    grid = _new_grid(confirmed, player.available_bricks)

    pending = []
    for draft in blocks:
        existing = grid.cells.get((draft.x, draft.y))
        if existing is not None and existing.confirmed and existing.color == draft.color:
            continue
        pending.append((draft.x, draft.y, draft.color, draft.build_date or now.date()))
    grid.place_batch(pending)

    for block in grid.drafts:
        db.add(TowerBlock(
            profile_id=profile_id,
            x_position=block.x,
            y_position=block.y,
            color=block.color,
            build_date=block.build_date,
            build_session_id=session_id,
            is_confirmed=False,
        ))
    await _upsert_session(db, profile_id, session_id, grid.drafts)
    await db.flush()

    logger.info("tower_drafts_saved", profile_id=profile_id, session_id=session_id, drafts=len(grid.drafts))
    return grid.drafts, grid.available_bricks


async def place_block(
    db: AsyncSession,
    profile_id: str,
    session_id: str,
    draft: DraftInput,
    *,
    now: datetime | None = None,
) -> tuple[Block, int]:
    """Append a single draft next to the existing drafts."""
    if now is None:
        now = datetime.now(timezone.utc)
    player = await get_player_stats(db, profile_id, for_update=True)
    rows = await _load_rows(db, profile_id)
    existing_drafts = sum(1 for r in rows if not r.is_confirmed)
    if existing_drafts >= player.available_bricks:
        raise InsufficientBricksError(needed=existing_drafts + 1, available=player.available_bricks)

    grid = _new_grid([_to_block(r) for r in rows], player.available_bricks - existing_drafts)
    block = grid.place_or_raise(draft.x, draft.y, draft.color, draft.build_date or now.date())

    db.add(TowerBlock(
        profile_id=profile_id,
        x_position=block.x,
        y_position=block.y,
        color=block.color,
        build_date=block.build_date,
        build_session_id=session_id,
        is_confirmed=False,
    ))
    await db.flush()
    return block, grid.available_bricks


async def discard_drafts(db: AsyncSession, profile_id: str) -> int:
    """Delete all unconfirmed drafts. Returns how many were removed."""
    result = await db.execute(
        delete(TowerBlock).where(
            TowerBlock.profile_id == profile_id,
            TowerBlock.is_confirmed.is_(False),
        )
    )
    return result.rowcount or 0


# ---------------------------------------------------------------------------
# Confirm / reset
# ---------------------------------------------------------------------------


async def confirm(
    db: AsyncSession,
    profile_id: str,
    session_id: str,
    blocks: list[DraftInput] | None = None,
    *,
    now: datetime | None = None,
) -> dict:
    """Confirm the profile's drafts and charge one brick per block.

    Raises:
        EmptyBatchError: there are no drafts to confirm.
        InsufficientBricksError: the drafts cost more than the available bricks.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if blocks is not None:
        await save_drafts(db, profile_id, session_id, blocks, now=now)

    player = await get_player_stats(db, profile_id, for_update=True)
    draft_rows = await _load_rows(db, profile_id, confirmed=False)
    if not draft_rows:
        raise EmptyBatchError()

    confirmed, remaining = confirm_batch([_to_block(r) for r in draft_rows], player.available_bricks)

    await db.execute(
        update(TowerBlock)
        .where(TowerBlock.block_id.in_([r.block_id for r in draft_rows]))
        .values(is_confirmed=True)
        .execution_options(synchronize_session="fetch")
    )
    player.available_bricks = remaining
    player.bricks_placed += len(confirmed)

    session = await db.get(TowerBuildingSession, session_id)
    _check_session_owner(session, profile_id)
    if session is None:
        session = await _upsert_session(db, profile_id, session_id, confirmed)
    session.is_confirmed = True
    session.confirmed_at = now

    await _record_history(db, profile_id, "confirm", len(confirmed), now)
    await db.flush()
    await refresh_tower_stats(db, profile_id, now=now, new_session=True)

    logger.info(
        "tower_confirmed",
        profile_id=profile_id,
        session_id=session_id,
        blocks=len(confirmed),
        available_bricks=player.available_bricks,
    )
    return _budget(player, message="Blocks confirmed successfully", blocks_confirmed=len(confirmed))


async def reset_tower(db: AsyncSession, profile_id: str, *, now: datetime | None = None) -> dict:
    """Delete every block and refund all placed bricks."""
    if now is None:
        now = datetime.now(timezone.utc)
    player = await get_player_stats(db, profile_id, for_update=True)

    count_result = await db.execute(
        select(func.count()).select_from(TowerBlock).where(TowerBlock.profile_id == profile_id)
    )
    removed = count_result.scalar_one()
    await db.execute(delete(TowerBlock).where(TowerBlock.profile_id == profile_id))

    player.available_bricks = player.total_bricks
    player.bricks_placed = 0

    await _record_history(db, profile_id, "reset", removed, now)
    await db.flush()
    await refresh_tower_stats(db, profile_id, now=now)

    logger.info("tower_reset", profile_id=profile_id, blocks_removed=removed)
    return {
        "message": "Tower reset successfully",
        "blocks_removed": removed,
        "available_bricks": player.available_bricks,
        "total_bricks": player.total_bricks,
    }


def _budget(player: PlayerStats, **extra: object) -> dict:
    return {
        **extra,
        "available_bricks": player.available_bricks,
        "total_bricks": player.total_bricks,
        "bricks_placed": player.bricks_placed,
    }


async def refresh_tower_stats(
    db: AsyncSession,
    profile_id: str,
    *,
    now: datetime | None = None,
    new_session: bool = False,
) -> TowerStats:
    """Recompute block counts and the tower's bounding box."""
    if now is None:
        now = datetime.now(timezone.utc)
    confirmed = [_to_block(r) for r in await _load_rows(db, profile_id, confirmed=True)]
    height, width = tower_dimensions(confirmed)

    stats = await db.get(TowerStats, profile_id)
    if stats is None:
        stats = TowerStats(profile_id=profile_id, total_sessions=0)
        db.add(stats)
    stats.total_blocks = len(confirmed)
    stats.confirmed_blocks = len(confirmed)
    stats.tower_height = height
    stats.tower_width = width
    stats.last_built_at = now
    if new_session:
        stats.total_sessions = (stats.total_sessions or 0) + 1
    await db.flush()
    return stats
