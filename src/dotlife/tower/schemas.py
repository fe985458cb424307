"""Request/response schemas for tower endpoints."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from dotlife.tower.grid import is_valid_color


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class BlockIn(BaseModel):
    """A block drawn on the client canvas."""

    x: int
    y: int
    color: str
    date: dt.date | None = None

    @field_validator("color")
    @classmethod
    def normalize_color(cls, v: str) -> str:
        """Require #rrggbb and store it lowercase."""
        if not is_valid_color(v):
            msg = "color must be a hex code like #a1b2c3"
            raise ValueError(msg)
        return v.lower()


class SaveDraftsRequest(BaseModel):
    """Replace the profile's drafts with the client's drawing."""

    session_id: str = Field(..., min_length=1, max_length=64)
    blocks: list[BlockIn]


class PlaceBlockRequest(BlockIn):
    """Append one draft block."""

    session_id: str = Field(..., min_length=1, max_length=64)


class ConfirmRequest(BaseModel):
    """Confirm drafts. When blocks are given they are saved first, in the same transaction."""

    session_id: str = Field(..., min_length=1, max_length=64)
    blocks: list[BlockIn] | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class BlockResponse(BaseModel):
    x: int
    y: int
    color: str
    date: dt.date
    saved: bool


class TowerStatsResponse(BaseModel):
    total_blocks: int = 0
    confirmed_blocks: int = 0
    tower_height: int = 0
    tower_width: int = 0
    total_sessions: int = 0
    last_built_at: dt.datetime | None = None


class TowerResponse(BaseModel):
    blocks: list[BlockResponse]
    stats: TowerStatsResponse | None = None
    available_bricks: int
    total_bricks: int
    bricks_placed: int
    remaining_blocks: int
    grid_width: int
    grid_height: int
    mode: str


class DraftsResponse(BaseModel):
    session_id: str
    drafts: list[BlockResponse]
    remaining_blocks: int


class ConfirmResponse(BaseModel):
    message: str
    blocks_confirmed: int
    available_bricks: int
    total_bricks: int
    bricks_placed: int


class ResetResponse(BaseModel):
    message: str
    blocks_removed: int
    available_bricks: int
    total_bricks: int


class TowerHistoryEntry(BaseModel):
    history_id: int
    action_type: str
    blocks_changed: int
    created_at: dt.datetime


class TowerHistoryResponse(BaseModel):
    entries: list[TowerHistoryEntry]


class CalendarEvent(BaseModel):
    event_date: dt.date
    quest_id: int
    quest_title: str
    completed: bool
    blocks_added: int


class CalendarResponse(BaseModel):
    year: int
    month: int
    events: list[CalendarEvent]


class DateQuest(BaseModel):
    id: str
    title: str
    completed: bool
    difficulty: str
    reward: int


class DateDetailsResponse(BaseModel):
    date: dt.date
    blocks_added: int
    quests: list[DateQuest]
    colors_used: list[str]
