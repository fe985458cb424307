"""Patch notes router: public reads and admin management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from dotlife.auth.dependencies import require_admin
from dotlife.database import get_session
from dotlife.db.models import PatchNote, Profile
from dotlife.patch_notes import service
from dotlife.patch_notes.schemas import (
    PatchNoteCreateRequest,
    PatchNoteListResponse,
    PatchNoteResponse,
    PatchNoteUpdateRequest,
)

router = APIRouter(prefix="/api/v1/patch-notes", tags=["Patch Notes"])


def _note_response(note: PatchNote) -> PatchNoteResponse:
    return PatchNoteResponse.model_validate(note, from_attributes=True)


@router.get("", response_model=PatchNoteListResponse)
async def list_published(
    db: AsyncSession = Depends(get_session),
) -> PatchNoteListResponse:
    """Published notes, newest release first."""
    notes = await service.list_patch_notes(db)
    return PatchNoteListResponse(notes=[_note_response(n) for n in notes])


@router.get("/admin/all", response_model=PatchNoteListResponse)
async def list_all(
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> PatchNoteListResponse:
    """All notes including drafts (admin)."""
    notes = await service.list_patch_notes(db, include_unpublished=True)
    return PatchNoteListResponse(notes=[_note_response(n) for n in notes])


@router.get("/{note_id}", response_model=PatchNoteResponse)
async def get_note(
    note_id: int,
    db: AsyncSession = Depends(get_session),
) -> PatchNoteResponse:
    note = await service.get_patch_note(db, note_id)
    return _note_response(note)


@router.post("", response_model=PatchNoteResponse, status_code=201)
async def create_note(
    body: PatchNoteCreateRequest,
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> PatchNoteResponse:
    note = await service.create_patch_note(
        db,
        version=body.version,
        title=body.title,
        content=body.content,
        release_date=body.release_date,
        is_published=body.is_published,
    )
    await db.commit()
    return _note_response(note)


@router.patch("/{note_id}", response_model=PatchNoteResponse)
async def update_note(
    note_id: int,
    body: PatchNoteUpdateRequest,
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> PatchNoteResponse:
    note = await service.update_patch_note(db, note_id, **body.model_dump(exclude_none=True))
    await db.commit()
    return _note_response(note)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: int,
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> Response:
    await service.delete_patch_note(db, note_id)
    await db.commit()
    return Response(status_code=204)
