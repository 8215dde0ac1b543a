"""Card ledger: the single owner of per-item learning state."""

import logging
from collections.abc import Iterable, Iterator
from datetime import date

from backend.srs.scheduling import CardProgress, SchedulingPolicy

logger = logging.getLogger(__name__)


class CardLedger:
    """Maps item ids to their CardProgress.

    Entries are created lazily on first exposure and only ever change
    through ``apply_review``. Unknown ids are never rejected: they read
    as brand new cards.
    """

    def __init__(
        self,
        policy: SchedulingPolicy | None = None,
        entries: Iterable[CardProgress] = (),
    ) -> None:
        self.policy = policy or SchedulingPolicy()
        self._progress: dict[int, CardProgress] = {}
        self.load(entries)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._progress

    def __len__(self) -> int:
        return len(self._progress)

    def __iter__(self) -> Iterator[CardProgress]:
        return iter(self._progress.values())

    def get(self, item_id: int) -> CardProgress | None:
        """Return stored progress, or None if the item was never exposed."""
        return self._progress.get(item_id)

    def get_progress(self, item_id: int, today: date) -> CardProgress:
        """Return stored progress, or a default one for an unseen item."""
        progress = self._progress.get(item_id)
        if progress is not None:
            return progress
        return CardProgress.new(item_id, today)

    def initialize(self, item_id: int, today: date) -> CardProgress:
        """Store default progress for ``item_id`` unless it already has some."""
        if item_id not in self._progress:
            self._progress[item_id] = CardProgress.new(item_id, today)
            logger.debug("Initialized progress for item %d", item_id)
        return self._progress[item_id]

    def apply_review(self, item_id: int, correct: bool, today: date) -> CardProgress:
        """Record a review outcome and return the updated progress."""
        current = self.get_progress(item_id, today)
        updated = self.policy.next(current, correct, today)
        self._progress[item_id] = updated
        logger.debug(
            "Reviewed item %d (%s): level %d -> %d, ease %.2f, next review %s",
            item_id,
            "correct" if correct else "incorrect",
            current.level,
            updated.level,
            updated.ease_factor,
            updated.next_review_date.isoformat(),
        )
        return updated

    def reset(self) -> None:
        """Forget every card's progress."""
        count = len(self._progress)
        self._progress.clear()
        logger.info("Ledger reset: %d entries removed", count)

    def snapshot(self) -> dict[int, CardProgress]:
        """Return a copy of the ledger contents for persistence."""
        return dict(self._progress)

    def load(self, entries: Iterable[CardProgress]) -> None:
        """Seed the ledger from previously saved progress."""
        for progress in entries:
            self._progress[progress.item_id] = progress
