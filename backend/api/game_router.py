"""API routes for timed speaking rounds."""

from fastapi import APIRouter, Depends

from backend.api.schemas import DifficultyResponse, RoundOutcomeRequest, RoundSummaryResponse
from backend.host import EngineHost, get_host
from backend.srs.difficulty import DifficultyController

router = APIRouter(prefix="/api/game", tags=["game"])


def _difficulty_response(controller: DifficultyController) -> DifficultyResponse:
    s = controller.state
    return DifficultyResponse(
        difficulty=s.difficulty,
        timer_seconds=controller.timer_seconds,
        streak=s.streak,
        consecutive_correct=s.consecutive_correct,
        consecutive_wrong=s.consecutive_wrong,
    )


@router.post("/start", response_model=DifficultyResponse)
async def game_start(host: EngineHost = Depends(get_host)) -> DifficultyResponse:
    async with host.lock:
        host.engine.start_game()
        return _difficulty_response(host.engine.difficulty)


@router.get("/timer", response_model=DifficultyResponse)
async def game_timer(host: EngineHost = Depends(get_host)) -> DifficultyResponse:
    """Current difficulty and the time budget for the next round."""
    return _difficulty_response(host.engine.difficulty)


@router.post("/answer", response_model=DifficultyResponse)
async def game_answer(
    request: RoundOutcomeRequest,
    host: EngineHost = Depends(get_host),
) -> DifficultyResponse:
    """Record a round outcome and return the adjusted pacing."""
    async with host.lock:
        host.engine.record_round_outcome(request.correct)
        return _difficulty_response(host.engine.difficulty)


@router.post("/end", response_model=RoundSummaryResponse)
async def game_end(host: EngineHost = Depends(get_host)) -> RoundSummaryResponse:
    async with host.lock:
        summary = host.engine.end_game()
    return RoundSummaryResponse.model_validate(summary)
