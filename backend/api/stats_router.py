"""API routes for learner statistics and dashboard data."""

from fastapi import APIRouter, Depends

from backend.api.schemas import CategoryStatsResponse, OverviewResponse
from backend.host import EngineHost, get_host

router = APIRouter(prefix="/api/stats", tags=["stats"])


def _category_stats(host: EngineHost, category_id: str) -> CategoryStatsResponse:
    stats = host.engine.get_category_stats(category_id)
    return CategoryStatsResponse(
        category=category_id,
        total=stats.total,
        mastered=stats.mastered,
        learning=stats.learning,
    )


@router.get("", response_model=OverviewResponse)
async def get_overview(host: EngineHost = Depends(get_host)) -> OverviewResponse:
    """Get overall statistics, with a breakdown per category."""
    overview = host.engine.get_overview()
    return OverviewResponse(
        total_items=overview.total_items,
        new_count=overview.new_count,
        learning_count=overview.learning_count,
        mastered_count=overview.mastered_count,
        review_count=overview.review_count,
        categories=[_category_stats(host, c.id) for c in host.engine.get_categories()],
    )


@router.get("/categories/{category_id}", response_model=CategoryStatsResponse)
async def get_category_stats(
    category_id: str,
    host: EngineHost = Depends(get_host),
) -> CategoryStatsResponse:
    return _category_stats(host, category_id)
