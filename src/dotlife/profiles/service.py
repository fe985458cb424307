"""Profile provisioning and profile updates."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from dotlife.config import get_settings
from dotlife.db.models import PlayerStats, Profile, TowerStats
from dotlife.errors import ConflictError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

USERNAME_RE = re.compile(r"^[A-Za-z0-9_]{3,32}$")


def _fallback_username(profile_id: str) -> str:
    return "user_" + re.sub(r"[^A-Za-z0-9]", "", profile_id)[:12].lower()


async def _free_fallback_username(db: AsyncSession, profile_id: str) -> str:
    """Fallback name for profile_id, suffixed with a counter until it is unused."""
    base = _fallback_username(profile_id)
    candidate = base
    suffix = 2
    while await _username_taken(db, candidate):
        candidate = f"{base}_{suffix}"
        suffix += 1
    return candidate


async def get_profile(db: AsyncSession, profile_id: str) -> Profile | None:
    """Fetch a profile by id."""
    result = await db.execute(select(Profile).where(Profile.profile_id == profile_id))
    return result.scalar_one_or_none()


async def get_profile_by_username(db: AsyncSession, username: str) -> Profile | None:
    """Fetch a profile by username (case-insensitive)."""
    result = await db.execute(select(Profile).where(Profile.username_normalized == username.lower()))
    return result.scalar_one_or_none()


async def _username_taken(db: AsyncSession, username: str, exclude_profile_id: str | None = None) -> bool:
    stmt = select(Profile.profile_id).where(Profile.username_normalized == username.lower())
    if exclude_profile_id is not None:
        stmt = stmt.where(Profile.profile_id != exclude_profile_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def get_or_create_profile(
    db: AsyncSession,
    profile_id: str,
    username: str | None = None,
) -> tuple[Profile, bool]:
    """
    Get the caller's profile, provisioning it on first sight.

    A new profile gets a player_stats row holding the starting bricks and an
    empty tower_stats row.

    Returns:
        Tuple of (profile, created).
    """
    profile = await get_profile(db, profile_id)
    if profile is not None:
        return profile, False

    if username is None or not USERNAME_RE.match(username) or await _username_taken(db, username):
        username = await _free_fallback_username(db, profile_id)

    starting_bricks = get_settings().starting_bricks
    profile = Profile(
        profile_id=profile_id,
        username=username,
        username_normalized=username.lower(),
        name=username,
    )
    db.add(profile)
    await db.flush()
    db.add(PlayerStats(
        profile_id=profile_id,
        total_bricks=starting_bricks,
        available_bricks=starting_bricks,
        bricks_placed=0,
    ))
    db.add(TowerStats(profile_id=profile_id))
    await db.flush()
    logger.info("profile_created", profile_id=profile_id, username=username)
    return profile, True


async def get_public_profile(db: AsyncSession, username: str) -> tuple[Profile, PlayerStats]:
    """
    Load a profile and its stats by username.

    Raises:
        NotFoundError: If no profile has that username.
    """
    profile = await get_profile_by_username(db, username)
    if profile is None:
        raise NotFoundError("Profile", username)
    result = await db.execute(select(PlayerStats).where(PlayerStats.profile_id == profile.profile_id))
    stats = result.scalar_one_or_none()
    if stats is None:
        raise NotFoundError("Player stats", profile.profile_id)
    return profile, stats


async def update_profile(
    db: AsyncSession,
    profile: Profile,
    name: str | None = None,
    role: str | None = None,
    headline: str | None = None,
    bio: str | None = None,
) -> Profile:
    """Update descriptive profile fields. ``None`` leaves a field unchanged."""
    if name is not None:
        profile.name = name
    if role is not None:
        profile.role = role
    if headline is not None:
        profile.headline = headline
    if bio is not None:
        profile.bio = bio
    await db.flush()
    return profile


async def update_identity(
    db: AsyncSession,
    profile: Profile,
    name: str | None = None,
    username: str | None = None,
) -> Profile:
    """
    Change display name and/or username.

    Raises:
        ConflictError: If the username is already taken (case-insensitive).
    """
    if username is not None:
        if await _username_taken(db, username, exclude_profile_id=profile.profile_id):
            msg = "Username already taken"
            raise ConflictError(msg)
        profile.username = username
        profile.username_normalized = username.lower()
    if name is not None:
        profile.name = name
    await db.flush()
    logger.info("profile_identity_updated", profile_id=profile.profile_id, username=profile.username)
    return profile


async def update_avatar(db: AsyncSession, profile: Profile, avatar_url: str | None) -> Profile:
    """Set or clear the avatar URL."""
    profile.avatar = avatar_url
    await db.flush()
    return profile
