"""Learning engine facade.

Wires the catalog, ledger, scheduling policy, planner, session runner and
difficulty controller together behind the query and command surface the
UI host uses. One engine serves one learner; build it once and pass it
around rather than keeping it in a module global.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from backend.catalog import Catalog, Category, LearnableItem
from backend.config import today as utc_today
from backend.srs.difficulty import DifficultyController, RoundSummary
from backend.srs.ledger import CardLedger
from backend.srs.queue import QueueConfig, SessionPlanner
from backend.srs.scheduling import CardProgress, SchedulingPolicy
from backend.srs.session import COMPLETE, SessionComplete, SessionRunner, SessionSummary
from backend.srs.stats import CategoryStats, ProgressOverview, ProgressQueries

logger = logging.getLogger(__name__)


@dataclass
class EngineSnapshot:
    """Everything the host has to persist between runs."""

    card_progress: dict[int, CardProgress] = field(default_factory=dict)
    selected_category: str | None = None


class LearningEngine:
    """Query and command surface over the learning-progression core."""

    def __init__(
        self,
        catalog: Catalog,
        snapshot: EngineSnapshot | None = None,
        policy: SchedulingPolicy | None = None,
        queue_config: QueueConfig | None = None,
        difficulty: DifficultyController | None = None,
        clock: Callable[[], date] = utc_today,
        on_change: Callable[[EngineSnapshot], None] | None = None,
    ) -> None:
        snapshot = snapshot or EngineSnapshot()
        self.catalog = catalog
        self.clock = clock
        self.on_change = on_change
        self.ledger = CardLedger(policy, snapshot.card_progress.values())
        self.planner = SessionPlanner(catalog, self.ledger, queue_config)
        self.runner = SessionRunner(self.ledger)
        self.queries = ProgressQueries(catalog, self.ledger, self.planner)
        self.difficulty = difficulty or DifficultyController()
        self.selected_category = snapshot.selected_category

    # --- Persistence ---

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            card_progress=self.ledger.snapshot(),
            selected_category=self.selected_category,
        )

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.snapshot())

    # --- Queries ---

    def get_words(self) -> list[LearnableItem]:
        return list(self.catalog.items)

    def get_categories(self) -> list[Category]:
        return list(self.catalog.categories)

    def get_progress(self, item_id: int) -> CardProgress:
        return self.ledger.get_progress(item_id, self.clock())

    def get_due_cards(self) -> list[LearnableItem]:
        return self.planner.get_due_cards(self.clock(), self.selected_category)

    def get_new_cards(self, limit: int | None = None) -> list[LearnableItem]:
        return self.planner.get_new_cards(limit, self.selected_category)

    def get_mastered_count(self) -> int:
        return self.queries.mastered_count()

    def get_learning_count(self) -> int:
        return self.queries.learning_count()

    def get_review_count(self) -> int:
        return self.queries.review_count(self.clock(), self.selected_category)

    def get_category_stats(self, category_id: str) -> CategoryStats:
        return self.queries.category_stats(category_id)

    def get_overview(self) -> ProgressOverview:
        return self.queries.overview(self.clock(), self.selected_category)

    # --- Card commands ---

    def initialize(self, item_id: int) -> CardProgress:
        exists = item_id in self.ledger
        progress = self.ledger.initialize(item_id, self.clock())
        if not exists:
            self._notify()
        return progress

    def review_card(self, item_id: int, correct: bool) -> CardProgress:
        """Record a review outcome for ``item_id``.

        When the item is the one under the session cursor, the session
        tally and cursor advance too.
        """
        today = self.clock()
        if self.runner.current() == item_id:
            progress = self.runner.review_current(correct, today)
        else:
            progress = self.ledger.apply_review(item_id, correct, today)
        self._notify()
        return progress

    def set_category_filter(self, category: str | None) -> None:
        self.selected_category = category or None
        logger.info("Category filter set to %s", self.selected_category or "all")
        self._notify()

    def reset_progress(self) -> None:
        """Forget all card progress, any running session and the category filter."""
        self.ledger.reset()
        self.runner.end()
        self.selected_category = None
        self._notify()

    # --- Session commands ---

    def plan_session(self) -> list[int]:
        return self.planner.plan_session(self.clock(), self.selected_category)

    def start_session(self, ids: list[int] | None = None) -> list[int]:
        """Start a study session over ``ids`` (planned from the ledger when omitted)."""
        if ids is None:
            ids = self.plan_session()
        self.runner.start(ids)
        return list(ids)

    def next_card(self) -> LearnableItem | SessionComplete:
        """Return the item under the session cursor, or COMPLETE."""
        while (item_id := self.runner.current()) is not COMPLETE:
            item = self.catalog.get(item_id)
            if item is not None:
                return item
            logger.warning("Skipping item %d: not in the catalog", item_id)
            self.runner.skip()
        return COMPLETE

    def end_session(self) -> SessionSummary:
        return self.runner.end()

    # --- Timed rounds ---

    def start_game(self) -> None:
        self.difficulty.start_game()

    def record_round_outcome(self, correct: bool) -> int:
        return self.difficulty.record_outcome(correct)

    def get_timer_seconds(self) -> int:
        return self.difficulty.timer_seconds

    def end_game(self) -> RoundSummary:
        return self.difficulty.end_game()
