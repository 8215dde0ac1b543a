"""Spaced-repetition scheduling policy.

An SM-2 style scheduler with a fixed ladder of mastery levels.

Key concepts:
- Level: mastery stage 0-5. 0 = new (never reviewed), 5 = mastered.
- Ease factor: multiplier in [1.3, 3.0] stretching the base interval of a level.
- Interval: days until the next review, base interval for the level times ease.
- Outcome: the only input a review carries, correct or incorrect.
"""

import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import IntEnum

# Base review interval in days, indexed by level (index 0 is never used
# after a review because a reviewed card is always at level >= 1)
BASE_INTERVALS = (0, 1, 3, 7, 14, 30)

DEFAULT_EASE = 2.5
MIN_EASE = 1.3
MAX_EASE = 3.0
EASE_STEP_CORRECT = 0.1
EASE_STEP_INCORRECT = 0.2


class CardLevel(IntEnum):
    """Mastery stage of a card."""

    NEW = 0
    LEVEL_1 = 1
    LEVEL_2 = 2
    LEVEL_3 = 3
    LEVEL_4 = 4
    MASTERED = 5

    @property
    def is_learning(self) -> bool:
        return CardLevel.NEW < self < CardLevel.MASTERED


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    The builtin ``round`` rounds halves to even (2.5 -> 2), which would
    shorten intervals and timers compared to standard rounding.
    """
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class CardProgress:
    """The learning state of a single item."""

    item_id: int
    level: CardLevel
    next_review_date: date
    correct_count: int = 0
    incorrect_count: int = 0
    last_reviewed: date | None = None
    ease_factor: float = DEFAULT_EASE

    @classmethod
    def new(cls, item_id: int, today: date) -> "CardProgress":
        """Default progress for an item that has never been reviewed."""
        return cls(item_id=item_id, level=CardLevel.NEW, next_review_date=today)

    @property
    def is_new(self) -> bool:
        return self.level == CardLevel.NEW

    @property
    def is_mastered(self) -> bool:
        return self.level == CardLevel.MASTERED


def is_due(progress: CardProgress, today: date) -> bool:
    """Return True if the card's next review date has arrived or passed."""
    return progress.next_review_date <= today


def interval_days(level: CardLevel, ease_factor: float) -> int:
    """Days until the next review for a card at ``level`` with ``ease_factor``."""
    return round_half_up(BASE_INTERVALS[level] * ease_factor)


class SchedulingPolicy:
    """Computes the next card state from a review outcome.

    This is the only place where levels and ease factors change. It holds
    no state of its own, so a single instance can be shared freely.
    """

    def __init__(self, intervals: tuple[int, ...] = BASE_INTERVALS) -> None:
        """Initialize the policy with the per-level base intervals."""
        if len(intervals) != len(CardLevel):
            raise ValueError(f"Expected {len(CardLevel)} intervals, got {len(intervals)}")
        self.intervals = intervals

    def next(self, progress: CardProgress, correct: bool, today: date) -> CardProgress:
        """Apply a review outcome to a card.

        Args:
            progress: Current card state (a default one for new cards).
            correct: Whether the learner answered correctly.
            today: The review date.

        Returns:
            The new CardProgress. The input is left untouched.
        """
        if correct:
            level = CardLevel(min(CardLevel.MASTERED, progress.level + 1))
            ease = min(MAX_EASE, progress.ease_factor + EASE_STEP_CORRECT)
        else:
            # A reviewed card never falls back to NEW
            level = CardLevel(max(CardLevel.LEVEL_1, progress.level - 1))
            ease = max(MIN_EASE, progress.ease_factor - EASE_STEP_INCORRECT)

        ease = round(ease, 2)
        interval = round_half_up(self.intervals[level] * ease)

        return replace(
            progress,
            level=level,
            ease_factor=ease,
            next_review_date=today + timedelta(days=interval),
            correct_count=progress.correct_count + (1 if correct else 0),
            incorrect_count=progress.incorrect_count + (0 if correct else 1),
            last_reviewed=today,
        )
