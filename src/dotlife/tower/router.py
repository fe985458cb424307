"""Tower API: /api/v1/tower/* endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dotlife.auth.dependencies import get_current_profile
from dotlife.database import get_session
from dotlife.db.models import Profile
from dotlife.tower import service
from dotlife.tower.schemas import (
    BlockResponse,
    CalendarEvent,
    CalendarResponse,
    ConfirmRequest,
    ConfirmResponse,
    DateDetailsResponse,
    DraftsResponse,
    PlaceBlockRequest,
    ResetResponse,
    SaveDraftsRequest,
    TowerHistoryEntry,
    TowerHistoryResponse,
    TowerResponse,
    TowerStatsResponse,
)

router = APIRouter(prefix="/api/v1/tower", tags=["Tower"])


@router.get("", response_model=TowerResponse)
async def get_tower(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> TowerResponse:
    """Load the caller's tower, drafts included."""
    data = await service.load_tower(db, profile.profile_id)
    stats = data.pop("stats")
    return TowerResponse(
        **data,
        stats=TowerStatsResponse.model_validate(stats, from_attributes=True) if stats else None,
    )


@router.put("/drafts", response_model=DraftsResponse)
async def save_drafts(
    body: SaveDraftsRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> DraftsResponse:
    """Replace the caller's drafts with the submitted drawing."""
    drafts, remaining = await service.save_drafts(
        db,
        profile.profile_id,
        body.session_id,
        [service.DraftInput.from_schema(b) for b in body.blocks],
    )
    await db.commit()
    return DraftsResponse(
        session_id=body.session_id,
        drafts=[BlockResponse(**service.block_to_dict(b)) for b in drafts],
        remaining_blocks=remaining,
    )


@router.post("/blocks", response_model=BlockResponse, status_code=201)
async def place_block(
    body: PlaceBlockRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> BlockResponse:
    """Append one draft block."""
    block, _remaining = await service.place_block(
        db, profile.profile_id, body.session_id, service.DraftInput.from_schema(body),
    )
    await db.commit()
    return BlockResponse(**service.block_to_dict(block))


@router.delete("/drafts")
async def discard_drafts(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> dict[str, int]:
    """Throw away all unconfirmed drafts."""
    removed = await service.discard_drafts(db, profile.profile_id)
    await db.commit()
    return {"drafts_removed": removed}


@router.post("/confirm", response_model=ConfirmResponse)
async def confirm_blocks(
    body: ConfirmRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> ConfirmResponse:
    """Confirm drafts and spend one brick per block."""
    blocks = None
    if body.blocks is not None:
        blocks = [service.DraftInput.from_schema(b) for b in body.blocks]
    result = await service.confirm(db, profile.profile_id, body.session_id, blocks)
    await db.commit()
    return ConfirmResponse(**result)


@router.post("/reset", response_model=ResetResponse)
async def reset_tower(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> ResetResponse:
    """Remove every block and refund all placed bricks."""
    result = await service.reset_tower(db, profile.profile_id)
    await db.commit()
    return ResetResponse(**result)


@router.get("/history", response_model=TowerHistoryResponse)
async def get_history(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> TowerHistoryResponse:
    entries = await service.get_history(db, profile.profile_id)
    return TowerHistoryResponse(
        entries=[TowerHistoryEntry.model_validate(e, from_attributes=True) for e in entries],
    )


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    year: int = Query(..., ge=2000, le=9999),
    month: int = Query(..., ge=1, le=12),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> CalendarResponse:
    """Quest events for one month."""
    events = await service.load_calendar(db, profile.profile_id, year, month)
    return CalendarResponse(year=year, month=month, events=[CalendarEvent(**e) for e in events])


@router.get("/dates/{day}", response_model=DateDetailsResponse)
async def get_date_details(
    day: date,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> DateDetailsResponse:
    """Blocks and quests for a single day."""
    details = await service.load_date_details(db, profile.profile_id, day)
    return DateDetailsResponse(**details)
