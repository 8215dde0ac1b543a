"""Queue building for study sessions.

Selects cards already in rotation that are due, then tops the session up
with cards the learner has never seen. Both lists follow catalog order.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from backend.catalog import Catalog, LearnableItem
from backend.config import settings
from backend.srs.ledger import CardLedger
from backend.srs.scheduling import is_due

logger = logging.getLogger(__name__)


@dataclass
class QueueConfig:
    """Configuration for queue building."""

    session_size: int = settings.session_size
    max_due: int = settings.max_due_per_session
    new_card_limit: int = settings.default_new_card_limit


@dataclass
class ReviewQueue:
    """A prepared set of item ids for a study session."""

    due_ids: list[int] = field(default_factory=list)
    new_ids: list[int] = field(default_factory=list)

    @property
    def ids(self) -> list[int]:
        """All ids in presentation order: every due card before any new card."""
        return self.due_ids + self.new_ids

    @property
    def total(self) -> int:
        return len(self.due_ids) + len(self.new_ids)


class SessionPlanner:
    """Read-only selection of due and new cards.

    The category filter is always passed in explicitly; the planner holds
    no selection state of its own and never touches the ledger's contents.
    """

    def __init__(
        self,
        catalog: Catalog,
        ledger: CardLedger,
        config: QueueConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.ledger = ledger
        self.config = config or QueueConfig()

    def get_due_cards(self, today: date, category: str | None = None) -> list[LearnableItem]:
        """Cards already started, not mastered, whose review date has arrived."""
        due = []
        for item in self.catalog.in_category(category):
            progress = self.ledger.get(item.id)
            # Never-exposed cards are new, not due
            if progress is None:
                continue
            # Mastered cards graduate out of the review rotation for good
            if progress.is_mastered:
                continue
            if is_due(progress, today):
                due.append(item)
        return due

    def get_new_cards(
        self,
        limit: int | None = None,
        category: str | None = None,
    ) -> list[LearnableItem]:
        """Cards the learner has never been exposed to, first ``limit`` in catalog order."""
        if limit is None:
            limit = self.config.new_card_limit
        if limit <= 0:
            return []
        new_cards = [
            item for item in self.catalog.in_category(category) if item.id not in self.ledger
        ]
        return new_cards[:limit]

    def build_queue(self, today: date, category: str | None = None) -> ReviewQueue:
        """Build the working set for one study session.

        Args:
            today: Current date for due checks.
            category: Optional category id to restrict the session to.

        Returns:
            A ReviewQueue with up to ``max_due`` due cards followed by new
            cards filling the session up to ``session_size``.
        """
        due_ids = [item.id for item in self.get_due_cards(today, category)]
        due_ids = due_ids[: min(self.config.max_due, self.config.session_size)]

        slots = self.config.session_size - len(due_ids)
        seen = set(due_ids)
        new_ids: list[int] = []
        # Ask for enough candidates to still fill every slot after skipping duplicates
        for item in self.get_new_cards(limit=slots + len(seen), category=category):
            if len(new_ids) >= slots:
                break
            if item.id in seen:
                continue
            seen.add(item.id)
            new_ids.append(item.id)

        queue = ReviewQueue(due_ids=due_ids, new_ids=new_ids)
        logger.info(
            "Built queue (category=%s): %d due + %d new = %d total",
            category or "all",
            len(due_ids),
            len(new_ids),
            queue.total,
        )
        return queue

    def plan_session(self, today: date, category: str | None = None) -> list[int]:
        """Return the ordered id list for a new session."""
        return self.build_queue(today, category).ids
