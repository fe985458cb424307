"""ORM models for profiles, quests, the tower and patch notes.

Column names follow the tables created by ``alembic/versions/001_initial_schema.py``.
Generic column types are used throughout so the same models run against
PostgreSQL in production and SQLite in the test suite.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from dotlife.db.base import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntId = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class Profile(Base):
    """Maps to the 'profiles' table. One row per identity-provider user."""

    __tablename__ = "profiles"

    profile_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    username_normalized: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="developer")
    headline: Mapped[str | None] = mapped_column(String(256), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


# ---------------------------------------------------------------------------
# Quests and player stats
# ---------------------------------------------------------------------------


class PlayerStats(Base):
    """Denormalized per-profile counters.

    available_bricks + bricks_placed == total_bricks always holds.
    """

    __tablename__ = "player_stats"

    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), primary_key=True
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp_to_next_level: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    consecutive_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_bricks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_bricks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bricks_placed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


class DailyQuest(Base):
    """Maps to the 'daily_quests' table."""

    __tablename__ = "daily_quests"

    quest_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False, default="easy")
    reward_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    reward_bricks: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    quest_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


class QuestHistory(Base):
    """Per-day completion summary."""

    __tablename__ = "quest_history"
    __table_args__ = (UniqueConstraint("profile_id", "completion_date", name="quest_history_profile_date_key"),)

    history_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False
    )
    completion_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_quests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_quests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_bricks_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_xp_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    perfect_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


# ---------------------------------------------------------------------------
# Tower
# ---------------------------------------------------------------------------


class TowerBlock(Base):
    """One pixel block. Drafts have is_confirmed=False until the batch is confirmed."""

    __tablename__ = "tower_blocks"
    __table_args__ = (
        UniqueConstraint("profile_id", "x_position", "y_position", name="tower_blocks_profile_cell_key"),
    )

    block_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True
    )
    x_position: Mapped[int] = mapped_column(Integer, nullable=False)
    y_position: Mapped[int] = mapped_column(Integer, nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    build_date: Mapped[date] = mapped_column(Date, nullable=False)
    build_session_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class TowerBuildingSession(Base):
    """A client drawing session; blocks_data keeps the last submitted drafts."""

    __tablename__ = "tower_building_sessions"

    session_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False
    )
    session_name: Mapped[str] = mapped_column(String(128), nullable=False, default="Building Session")
    blocks_data: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    is_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class TowerStats(Base):
    """Derived tower dimensions, refreshed after every confirm or reset."""

    __tablename__ = "tower_stats"

    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), primary_key=True
    )
    total_blocks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    confirmed_blocks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tower_height: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tower_width: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_built_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


class TowerHistory(Base):
    """Audit trail of confirm/reset actions."""

    __tablename__ = "tower_history"

    history_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True
    )
    action_type: Mapped[str] = mapped_column(String(16), nullable=False)
    blocks_changed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Patch notes
# ---------------------------------------------------------------------------


class PatchNote(Base):
    """Maps to the 'patch_notes' table."""

    __tablename__ = "patch_notes"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    version: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    release_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
