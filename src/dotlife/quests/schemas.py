"""Request/response schemas for quest endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]


class QuestCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    difficulty: Difficulty = "easy"


class QuestUpdateRequest(BaseModel):
    """Fields left out are unchanged."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    difficulty: Difficulty | None = None


class QuestResponse(BaseModel):
    quest_id: int
    title: str
    description: str
    difficulty: str
    reward_xp: int
    reward_bricks: int
    completed: bool
    confirmed: bool
    quest_date: dt.date
    deadline: dt.datetime
    completed_at: dt.datetime | None = None


class QuestListResponse(BaseModel):
    quests: list[QuestResponse]


class CompleteQuestResponse(BaseModel):
    """Result of completing a quest, with the updated counters."""

    quest: QuestResponse
    level: int
    level_up: bool
    total_xp: int
    current_xp: int
    xp_to_next_level: int
    consecutive_days: int
    available_bricks: int
    total_bricks: int


class DailySummaryResponse(BaseModel):
    date: dt.date
    total: int
    completed: int
    all_completed: bool
    all_confirmed: bool


class QuestHistoryEntry(BaseModel):
    completion_date: dt.date
    total_quests: int
    completed_quests: int
    total_bricks_earned: int
    total_xp_earned: int
    perfect_day: bool


class QuestHistoryResponse(BaseModel):
    days: list[QuestHistoryEntry]
