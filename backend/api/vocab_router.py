"""API routes for vocabulary cards and their progress."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.api.schemas import (
    CategoryFilterRequest,
    CategoryFilterResponse,
    CategoryResponse,
    ItemResponse,
    ProgressResponse,
    ReviewRequest,
)
from backend.host import EngineHost, get_host

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vocab", tags=["vocab"])


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(host: EngineHost = Depends(get_host)) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in host.engine.get_categories()]


@router.get("/items/{item_id}", response_model=ItemResponse)
async def get_item(item_id: int, host: EngineHost = Depends(get_host)) -> ItemResponse:
    item = host.engine.catalog.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return ItemResponse.model_validate(item)


@router.get("/due", response_model=list[ItemResponse])
async def due_cards(host: EngineHost = Depends(get_host)) -> list[ItemResponse]:
    """Cards due for review under the current category filter."""
    return [ItemResponse.model_validate(item) for item in host.engine.get_due_cards()]


@router.get("/new", response_model=list[ItemResponse])
async def new_cards(
    limit: int | None = None,
    host: EngineHost = Depends(get_host),
) -> list[ItemResponse]:
    """Cards never studied, in catalog order."""
    return [ItemResponse.model_validate(item) for item in host.engine.get_new_cards(limit)]


@router.get("/progress/{item_id}", response_model=ProgressResponse)
async def get_progress(item_id: int, host: EngineHost = Depends(get_host)) -> ProgressResponse:
    """Progress of an item; unseen items report default progress."""
    return ProgressResponse.model_validate(host.engine.get_progress(item_id))


@router.post("/progress/{item_id}/initialize", response_model=ProgressResponse)
async def initialize_progress(
    item_id: int,
    host: EngineHost = Depends(get_host),
) -> ProgressResponse:
    async with host.mutate() as engine:
        progress = engine.initialize(item_id)
    return ProgressResponse.model_validate(progress)


@router.post("/review/{item_id}", response_model=ProgressResponse)
async def review_card(
    item_id: int,
    request: ReviewRequest,
    host: EngineHost = Depends(get_host),
) -> ProgressResponse:
    """Record a review outcome for a single card."""
    async with host.mutate() as engine:
        progress = engine.review_card(item_id, request.correct)
    return ProgressResponse.model_validate(progress)


@router.get("/filter", response_model=CategoryFilterResponse)
async def get_filter(host: EngineHost = Depends(get_host)) -> CategoryFilterResponse:
    return CategoryFilterResponse(category=host.engine.selected_category)


@router.put("/filter", response_model=CategoryFilterResponse)
async def set_filter(
    request: CategoryFilterRequest,
    host: EngineHost = Depends(get_host),
) -> CategoryFilterResponse:
    async with host.mutate() as engine:
        engine.set_category_filter(request.category)
    return CategoryFilterResponse(category=host.engine.selected_category)


@router.post("/reset")
async def reset_progress(host: EngineHost = Depends(get_host)) -> dict:
    """Erase all card progress."""
    async with host.mutate() as engine:
        engine.reset_progress()
    logger.warning("All vocabulary progress was reset")
    return {"status": "reset"}
