"""Study session runner.

Walks a planned list of item ids with a cursor, sends each outcome to the
ledger and keeps a running tally. Ending a session never undoes reviews
that were already applied.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date

from backend.srs.ledger import CardLedger
from backend.srs.scheduling import CardProgress, round_half_up

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETE = "complete"


class SessionComplete:
    """Sentinel returned once the cursor has passed the last card."""

    _instance: SessionComplete | None = None

    def __new__(cls) -> SessionComplete:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "COMPLETE"

    def __bool__(self) -> bool:
        return False


COMPLETE = SessionComplete()


@dataclass(frozen=True)
class SessionSummary:
    """Result of an ended session."""

    correct: int
    total: int

    @property
    def accuracy(self) -> int:
        """Percentage of correct answers, rounded (0 for an empty session)."""
        if self.total == 0:
            return 0
        return round_half_up(self.correct / self.total * 100)


@dataclass
class StudySession:
    """Transient state of one sitting."""

    ids: list[int] = field(default_factory=list)
    cursor: int = 0
    correct: int = 0
    total: int = 0


class SessionRunner:
    """State machine over a StudySession: idle -> active -> complete."""

    def __init__(self, ledger: CardLedger) -> None:
        self.ledger = ledger
        self._session: StudySession | None = None

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.IDLE
        if self._session.cursor >= len(self._session.ids):
            return SessionState.COMPLETE
        return SessionState.ACTIVE

    @property
    def session(self) -> StudySession | None:
        return self._session

    @property
    def remaining(self) -> int:
        """Number of cards left to review."""
        if self._session is None:
            return 0
        return max(0, len(self._session.ids) - self._session.cursor)

    def start(self, ids: list[int]) -> None:
        """Begin a new session over ``ids``, replacing any session in progress."""
        self._session = StudySession(ids=list(ids))
        logger.info("Started session: %d cards queued", len(ids))

    def current(self) -> int | SessionComplete:
        """Return the id under the cursor, or COMPLETE."""
        if self.state is not SessionState.ACTIVE:
            return COMPLETE
        return self._session.ids[self._session.cursor]

    def review_current(self, correct: bool, today: date) -> CardProgress | SessionComplete:
        """Apply an outcome to the current card and move to the next one.

        Returns the updated progress, or COMPLETE if there is no card to
        review (idle or finished session), in which case nothing changes.
        """
        item_id = self.current()
        if item_id is COMPLETE:
            return COMPLETE

        progress = self.ledger.apply_review(item_id, correct, today)
        self._session.total += 1
        if correct:
            self._session.correct += 1
        self._session.cursor += 1
        return progress

    def skip(self) -> None:
        """Move past the current card without reviewing it."""
        if self.state is SessionState.ACTIVE:
            self._session.cursor += 1

    def end(self) -> SessionSummary:
        """Finish the session, returning its tally and clearing its state."""
        if self._session is None:
            return SessionSummary(correct=0, total=0)

        summary = SessionSummary(correct=self._session.correct, total=self._session.total)
        self._session = None
        logger.info(
            "Ended session: %d/%d correct (%d%%)",
            summary.correct,
            summary.total,
            summary.accuracy,
        )
        return summary
