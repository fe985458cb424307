"""Patch note storage."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from dotlife.db.models import PatchNote
from dotlife.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

_UPDATABLE = ("version", "title", "content", "release_date", "is_published")


async def list_patch_notes(db: AsyncSession, *, include_unpublished: bool = False) -> list[PatchNote]:
    """Newest release first."""
    stmt = select(PatchNote)
    if not include_unpublished:
        stmt = stmt.where(PatchNote.is_published.is_(True))
    result = await db.execute(stmt.order_by(PatchNote.release_date.desc(), PatchNote.id.desc()))
    return list(result.scalars().all())


async def get_patch_note(db: AsyncSession, note_id: int, *, include_unpublished: bool = False) -> PatchNote:
    """
    Fetch one note.

    Raises:
        NotFoundError: If it does not exist, or is unpublished and unpublished notes are hidden.
    """
    note = await db.get(PatchNote, note_id)
    if note is None or (not note.is_published and not include_unpublished):
        raise NotFoundError("Patch note", note_id)
    return note


async def create_patch_note(
    db: AsyncSession,
    version: str,
    title: str,
    content: str,
    release_date: date,
    is_published: bool = False,
) -> PatchNote:
    note = PatchNote(
        version=version,
        title=title,
        content=content,
        release_date=release_date,
        is_published=is_published,
    )
    db.add(note)
    await db.flush()
    logger.info("patch_note_created", patch_note_id=note.id, version=version)
    return note


async def update_patch_note(db: AsyncSession, note_id: int, **fields: object) -> PatchNote:
    """Apply the given fields; ``None`` values are ignored."""
    note = await get_patch_note(db, note_id, include_unpublished=True)
    for name in _UPDATABLE:
        value = fields.get(name)
        if value is not None:
            setattr(note, name, value)
    await db.flush()
    return note


async def delete_patch_note(db: AsyncSession, note_id: int) -> None:
    note = await get_patch_note(db, note_id, include_unpublished=True)
    await db.delete(note)
    await db.flush()
    logger.info("patch_note_deleted", patch_note_id=note_id)
