"""Quest router: /api/v1/quests/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from dotlife.auth.dependencies import get_current_profile
from dotlife.database import get_session
from dotlife.db.models import DailyQuest, Profile
from dotlife.quests import service
from dotlife.quests.schemas import (
    CompleteQuestResponse,
    DailySummaryResponse,
    QuestCreateRequest,
    QuestHistoryEntry,
    QuestHistoryResponse,
    QuestListResponse,
    QuestResponse,
    QuestUpdateRequest,
)

router = APIRouter(prefix="/api/v1/quests", tags=["Quests"])


def _quest_response(quest: DailyQuest) -> QuestResponse:
    return QuestResponse.model_validate(quest, from_attributes=True)


@router.get("/today", response_model=QuestListResponse)
async def list_today(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> QuestListResponse:
    """Today's quests (UTC day)."""
    quests = await service.list_today(db, profile.profile_id)
    return QuestListResponse(quests=[_quest_response(q) for q in quests])


@router.get("/today/summary", response_model=DailySummaryResponse)
async def daily_summary(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> DailySummaryResponse:
    summary = await service.daily_summary(db, profile.profile_id)
    return DailySummaryResponse(**summary)


@router.get("/history", response_model=QuestHistoryResponse)
async def quest_history(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> QuestHistoryResponse:
    """Per-day completion summaries for the last week."""
    rows = await service.get_history(db, profile.profile_id)
    return QuestHistoryResponse(days=[QuestHistoryEntry.model_validate(r, from_attributes=True) for r in rows])


@router.post("", response_model=QuestResponse, status_code=201)
async def create_quest(
    body: QuestCreateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> QuestResponse:
    """Add a quest to today's list."""
    quest = await service.create_quest(
        db, profile.profile_id, body.title, body.description, body.difficulty,
    )
    await db.commit()
    return _quest_response(quest)


@router.patch("/{quest_id}", response_model=QuestResponse)
async def update_quest(
    quest_id: int,
    body: QuestUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> QuestResponse:
    quest = await service.update_quest(
        db,
        profile.profile_id,
        quest_id,
        title=body.title,
        description=body.description,
        difficulty=body.difficulty,
    )
    await db.commit()
    return _quest_response(quest)


@router.delete("/{quest_id}", status_code=204)
async def delete_quest(
    quest_id: int,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> Response:
    await service.delete_quest(db, profile.profile_id, quest_id)
    await db.commit()
    return Response(status_code=204)


@router.post("/confirm", response_model=QuestListResponse)
async def confirm_quests(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> QuestListResponse:
    """Lock today's list; its quests become completable."""
    quests = await service.confirm_quests(db, profile.profile_id)
    await db.commit()
    return QuestListResponse(quests=[_quest_response(q) for q in quests])


@router.post("/{quest_id}/complete", response_model=CompleteQuestResponse)
async def complete_quest(
    quest_id: int,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> CompleteQuestResponse:
    """Complete a confirmed quest and collect its XP and bricks."""
    result = await service.complete_quest(db, profile.profile_id, quest_id)
    await db.commit()
    stats = result["stats"]
    return CompleteQuestResponse(
        quest=_quest_response(result["quest"]),
        level=stats.level,
        level_up=result["level_up"],
        total_xp=stats.total_xp,
        current_xp=stats.current_xp,
        xp_to_next_level=stats.xp_to_next_level,
        consecutive_days=stats.consecutive_days,
        available_bricks=stats.available_bricks,
        total_bricks=stats.total_bricks,
    )
