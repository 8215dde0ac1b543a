"""Adaptive difficulty for timed speaking rounds.

Difficulty runs from 1 (easiest) to 10 (hardest) and sets the response
time budget of each round. Three correct answers in a row raise it by
one; two wrong answers in a row lower it by one. This state belongs to a
single game and is never persisted.
"""

import logging
from dataclasses import dataclass

from backend.config import settings
from backend.srs.scheduling import round_half_up

logger = logging.getLogger(__name__)

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10
CORRECT_TO_LEVEL_UP = 3
WRONG_TO_LEVEL_DOWN = 2

# timer = BASE_TIMER_SECONDS - difficulty * TIMER_STEP_SECONDS
BASE_TIMER_SECONDS = 8.0
TIMER_STEP_SECONDS = 0.5


def timer_seconds(difficulty: int) -> int:
    """Response time budget for a round at ``difficulty`` (8s at 1, 3s at 10)."""
    return round_half_up(BASE_TIMER_SECONDS - difficulty * TIMER_STEP_SECONDS)


@dataclass
class DifficultyState:
    difficulty: int = settings.initial_difficulty
    consecutive_correct: int = 0
    consecutive_wrong: int = 0
    streak: int = 0  # Uninterrupted correct answers
    best_streak: int = 0
    correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class RoundSummary:
    """Result of a finished timed game."""

    correct: int
    total: int
    accuracy: int  # Percentage, 0-100
    best_streak: int
    final_difficulty: int


class DifficultyController:
    """Paces timed rounds from streaks of outcomes."""

    def __init__(self, initial_difficulty: int = settings.initial_difficulty) -> None:
        self.initial_difficulty = max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, initial_difficulty))
        self.state = DifficultyState(difficulty=self.initial_difficulty)

    @property
    def difficulty(self) -> int:
        return self.state.difficulty

    @property
    def timer_seconds(self) -> int:
        return timer_seconds(self.state.difficulty)

    def start_game(self) -> None:
        """Reset all pacing state for a new game."""
        self.state = DifficultyState(difficulty=self.initial_difficulty)

    def record_outcome(self, correct: bool) -> int:
        """Record one round's outcome and return the resulting difficulty.

        A round whose timer expired should be recorded as incorrect.
        """
        s = self.state
        s.total += 1
        previous = s.difficulty

        if correct:
            s.correct += 1
            s.streak += 1
            s.best_streak = max(s.best_streak, s.streak)
            s.consecutive_correct += 1
            s.consecutive_wrong = 0
            if s.consecutive_correct >= CORRECT_TO_LEVEL_UP:
                s.difficulty = min(MAX_DIFFICULTY, s.difficulty + 1)
                s.consecutive_correct = 0
        else:
            s.streak = 0
            s.consecutive_wrong += 1
            s.consecutive_correct = 0
            if s.consecutive_wrong >= WRONG_TO_LEVEL_DOWN:
                s.difficulty = max(MIN_DIFFICULTY, s.difficulty - 1)
                s.consecutive_wrong = 0

        if s.difficulty != previous:
            logger.debug(
                "Difficulty %d -> %d (timer %ds)", previous, s.difficulty, self.timer_seconds
            )
        return s.difficulty

    def end_game(self) -> RoundSummary:
        """Summarize the game and discard its state."""
        s = self.state
        accuracy = round_half_up(s.correct / s.total * 100) if s.total else 0
        summary = RoundSummary(
            correct=s.correct,
            total=s.total,
            accuracy=accuracy,
            best_streak=s.best_streak,
            final_difficulty=s.difficulty,
        )
        self.start_game()
        logger.info(
            "Game ended: %d/%d correct, best streak %d, difficulty %d",
            summary.correct,
            summary.total,
            summary.best_streak,
            summary.final_difficulty,
        )
        return summary
