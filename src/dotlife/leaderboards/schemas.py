"""Response schemas for leaderboard endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """One ranked profile.

    For the overall board ``xp`` and ``bricks`` are lifetime totals; for
    period boards they are sums over quests completed in the period.
    """

    rank: int
    profile_id: str
    username: str
    name: str
    avatar: str | None = None
    level: int
    xp: int
    bricks: int
    quests_completed: int | None = None


class LeaderboardResponse(BaseModel):
    period: str
    period_key: str
    entries: list[LeaderboardEntry]


class AroundMeResponse(BaseModel):
    period: str
    period_key: str
    top: list[LeaderboardEntry]
    me: LeaderboardEntry | None = None
    total: int
