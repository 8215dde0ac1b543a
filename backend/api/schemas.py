"""Pydantic schemas for API request/response models."""

from datetime import date

from pydantic import BaseModel

# --- Vocabulary ---


class ItemResponse(BaseModel):
    """A catalog item as shown on a flash card."""

    model_config = {"from_attributes": True}

    id: int
    prompt_text: str
    target_text: str
    category: str
    difficulty: str
    timer_seconds: int | None = None


class CategoryResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    description: str
    icon: str


class ProgressResponse(BaseModel):
    """Learning state of one item."""

    model_config = {"from_attributes": True}

    item_id: int
    level: int  # 0=new, 5=mastered
    next_review_date: date
    correct_count: int
    incorrect_count: int
    last_reviewed: date | None
    ease_factor: float


class ReviewRequest(BaseModel):
    """Outcome of reviewing one item."""

    correct: bool


class CategoryFilterRequest(BaseModel):
    category: str | None = None


class CategoryFilterResponse(BaseModel):
    category: str | None


# --- Session ---


class SessionStartRequest(BaseModel):
    """Explicit ids to study; the session is planned when omitted."""

    item_ids: list[int] | None = None


class SessionStartResponse(BaseModel):
    item_ids: list[int]
    total_cards: int


class NextCardResponse(BaseModel):
    """The card under the session cursor, or ``complete`` with no item."""

    complete: bool
    item: ItemResponse | None = None
    progress: ProgressResponse | None = None
    remaining: int


class SessionReviewResponse(BaseModel):
    progress: ProgressResponse
    remaining: int
    session_complete: bool


class SessionSummaryResponse(BaseModel):
    correct: int
    total: int
    accuracy: int


# --- Timed game ---


class RoundOutcomeRequest(BaseModel):
    """Outcome of one timed round; a timeout is sent as ``correct=false``."""

    correct: bool


class DifficultyResponse(BaseModel):
    difficulty: int
    timer_seconds: int
    streak: int
    consecutive_correct: int
    consecutive_wrong: int


class RoundSummaryResponse(BaseModel):
    model_config = {"from_attributes": True}

    correct: int
    total: int
    accuracy: int
    best_streak: int
    final_difficulty: int


# --- Stats ---


class CategoryStatsResponse(BaseModel):
    category: str
    total: int
    mastered: int
    learning: int


class OverviewResponse(BaseModel):
    """Dashboard counts for the learner."""

    total_items: int
    new_count: int
    learning_count: int
    mastered_count: int
    review_count: int
    categories: list[CategoryStatsResponse]
