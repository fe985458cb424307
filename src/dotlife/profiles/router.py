"""Profile router: /api/v1/profiles/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dotlife.auth.dependencies import get_current_profile
from dotlife.database import get_session
from dotlife.db.models import Profile
from dotlife.profiles.schemas import (
    AvatarUpdateRequest,
    IdentityUpdateRequest,
    PlayerStatsResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    PublicProfileResponse,
)
from dotlife.profiles.service import (
    get_public_profile,
    update_avatar,
    update_identity,
    update_profile,
)
from dotlife.quests.stats_service import get_player_stats

router = APIRouter(prefix="/api/v1/profiles", tags=["Profiles"])


def _profile_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse.model_validate(profile, from_attributes=True)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    profile: Profile = Depends(get_current_profile),
) -> ProfileResponse:
    """Get own profile."""
    return _profile_response(profile)


@router.get("/me/stats", response_model=PlayerStatsResponse)
async def get_my_stats(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> PlayerStatsResponse:
    """Level, XP, streak and brick counters."""
    stats = await get_player_stats(db, profile.profile_id)
    return PlayerStatsResponse.model_validate(stats, from_attributes=True)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Update name, role, headline, bio."""
    profile = await update_profile(
        db,
        profile,
        name=body.name,
        role=body.role,
        headline=body.headline,
        bio=body.bio,
    )
    await db.commit()
    return _profile_response(profile)


@router.patch("/me/identity", response_model=ProfileResponse)
async def update_my_identity(
    body: IdentityUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Change display name and/or username."""
    profile = await update_identity(db, profile, name=body.name, username=body.username)
    await db.commit()
    return _profile_response(profile)


@router.put("/me/avatar", response_model=ProfileResponse)
async def update_my_avatar(
    body: AvatarUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    profile = await update_avatar(db, profile, body.avatar_url)
    await db.commit()
    return _profile_response(profile)


@router.get("/{username}", response_model=PublicProfileResponse)
async def get_profile_by_username(
    username: str,
    db: AsyncSession = Depends(get_session),
) -> PublicProfileResponse:
    """Public profile with player stats. No authentication required."""
    profile, stats = await get_public_profile(db, username)
    return PublicProfileResponse(
        username=profile.username,
        name=profile.name,
        avatar=profile.avatar,
        role=profile.role,
        headline=profile.headline,
        bio=profile.bio,
        created_at=profile.created_at,
        stats=PlayerStatsResponse.model_validate(stats, from_attributes=True),
    )
