"""Request/response schemas for patch notes."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field


class PatchNoteCreateRequest(BaseModel):
    version: str = Field(..., min_length=1, max_length=32)
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    release_date: dt.date
    is_published: bool = False


class PatchNoteUpdateRequest(BaseModel):
    version: str | None = Field(None, min_length=1, max_length=32)
    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    release_date: dt.date | None = None
    is_published: bool | None = None


class PatchNoteResponse(BaseModel):
    id: int
    version: str
    title: str
    content: str
    release_date: dt.date
    is_published: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class PatchNoteListResponse(BaseModel):
    notes: list[PatchNoteResponse]
