"""API routes for study sessions."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.api.schemas import (
    ItemResponse,
    NextCardResponse,
    ProgressResponse,
    ReviewRequest,
    SessionReviewResponse,
    SessionStartRequest,
    SessionStartResponse,
    SessionSummaryResponse,
)
from backend.host import EngineHost, get_host
from backend.srs.session import COMPLETE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])


@router.post("/start", response_model=SessionStartResponse)
async def session_start(
    request: SessionStartRequest,
    host: EngineHost = Depends(get_host),
) -> SessionStartResponse:
    """Start a study session, planning one when no ids are given."""
    async with host.mutate() as engine:
        ids = engine.start_session(request.item_ids)

    if not ids:
        raise HTTPException(status_code=404, detail="No cards available for review")

    return SessionStartResponse(item_ids=ids, total_cards=len(ids))


@router.get("/next", response_model=NextCardResponse)
async def session_next(host: EngineHost = Depends(get_host)) -> NextCardResponse:
    """Get the card under the session cursor."""
    async with host.mutate() as engine:
        item = engine.next_card()
        remaining = engine.runner.remaining

    if item is COMPLETE:
        return NextCardResponse(complete=True, remaining=0)

    return NextCardResponse(
        complete=False,
        item=ItemResponse.model_validate(item),
        progress=ProgressResponse.model_validate(host.engine.get_progress(item.id)),
        remaining=remaining,
    )


@router.post("/review", response_model=SessionReviewResponse)
async def session_review(
    request: ReviewRequest,
    host: EngineHost = Depends(get_host),
) -> SessionReviewResponse:
    """Record the outcome for the current card and advance."""
    async with host.mutate() as engine:
        item = engine.next_card()
        if item is COMPLETE:
            raise HTTPException(status_code=410, detail="Session is complete")
        progress = engine.review_card(item.id, request.correct)
        remaining = engine.runner.remaining

    return SessionReviewResponse(
        progress=ProgressResponse.model_validate(progress),
        remaining=remaining,
        session_complete=remaining == 0,
    )


@router.post("/end", response_model=SessionSummaryResponse)
async def session_end(host: EngineHost = Depends(get_host)) -> SessionSummaryResponse:
    """End the session. Reviews already recorded are kept."""
    async with host.mutate() as engine:
        summary = engine.end_session()
    return SessionSummaryResponse(
        correct=summary.correct,
        total=summary.total,
        accuracy=summary.accuracy,
    )
