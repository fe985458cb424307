"""Request/response schemas for profile endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from dotlife.profiles.service import USERNAME_RE

Role = Literal["developer", "designer", "marketer", "founder", "product-manager"]


class ProfileResponse(BaseModel):
    """The caller's own profile."""

    profile_id: str
    username: str
    name: str
    avatar: str | None = None
    role: str
    headline: str | None = None
    bio: str | None = None
    created_at: datetime


class PlayerStatsResponse(BaseModel):
    level: int
    total_xp: int
    current_xp: int
    xp_to_next_level: int
    consecutive_days: int
    last_completed_date: date | None = None
    total_bricks: int
    available_bricks: int
    bricks_placed: int


class PublicProfileResponse(BaseModel):
    """Profile as shown to other users."""

    username: str
    name: str
    avatar: str | None = None
    role: str
    headline: str | None = None
    bio: str | None = None
    created_at: datetime
    stats: PlayerStatsResponse


class ProfileUpdateRequest(BaseModel):
    """Update descriptive profile fields."""

    name: str | None = Field(None, min_length=1, max_length=128)
    role: Role | None = None
    headline: str | None = Field(None, max_length=256)
    bio: str | None = Field(None, max_length=2000)


class IdentityUpdateRequest(BaseModel):
    """Change display name and/or username."""

    name: str | None = Field(None, min_length=1, max_length=128)
    username: str | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        """3-32 letters, digits or underscores."""
        if v is not None and not USERNAME_RE.match(v):
            msg = "username must be 3-32 letters, digits or underscores"
            raise ValueError(msg)
        return v


class AvatarUpdateRequest(BaseModel):
    avatar_url: str | None = Field(None, max_length=2048)

    @field_validator("avatar_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("http://", "https://")):
            msg = "avatar_url must be an http(s) URL"
            raise ValueError(msg)
        return v
