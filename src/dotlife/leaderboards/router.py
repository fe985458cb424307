"""Leaderboard router: /api/v1/leaderboards/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from dotlife.auth.dependencies import get_current_profile
from dotlife.config import get_settings
from dotlife.database import get_session
from dotlife.db.models import Profile
from dotlife.leaderboards.periods import Period, period_key, utc_today
from dotlife.leaderboards.schemas import AroundMeResponse, LeaderboardEntry, LeaderboardResponse
from dotlife.leaderboards.service import around_me, get_leaderboard
from dotlife.redis_client import get_redis

router = APIRouter(prefix="/api/v1/leaderboards", tags=["Leaderboards"])


@router.get("/{period}", response_model=LeaderboardResponse)
async def leaderboard(
    period: Period,
    limit: int | None = Query(None, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    redis: Redis | None = Depends(get_redis),
) -> LeaderboardResponse:
    """Ranked profiles for overall, daily, weekly, monthly or yearly."""
    today = utc_today()
    entries = await get_leaderboard(
        db, period, today, limit=limit or get_settings().leaderboard_limit, redis=redis,
    )
    return LeaderboardResponse(
        period=period.value,
        period_key=period_key(period, today),
        entries=[LeaderboardEntry(**e) for e in entries],
    )


@router.get("/{period}/me", response_model=AroundMeResponse)
async def leaderboard_around_me(
    period: Period,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
    redis: Redis | None = Depends(get_redis),
) -> AroundMeResponse:
    """Top 10 plus the caller's own rank."""
    today = utc_today()
    result = await around_me(db, period, today, profile.profile_id, redis=redis)
    return AroundMeResponse(
        period=period.value,
        period_key=period_key(period, today),
        top=[LeaderboardEntry(**e) for e in result["top"]],
        me=LeaderboardEntry(**result["me"]) if result["me"] else None,
        total=result["total"],
    )
