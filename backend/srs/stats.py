"""Derived progress views for dashboards."""

from dataclasses import dataclass
from datetime import date

from backend.catalog import Catalog
from backend.srs.ledger import CardLedger
from backend.srs.queue import SessionPlanner


@dataclass(frozen=True)
class CategoryStats:
    total: int
    mastered: int
    learning: int


@dataclass(frozen=True)
class ProgressOverview:
    total_items: int
    new_count: int  # Items never exposed
    learning_count: int
    mastered_count: int
    review_count: int  # Due today


class ProgressQueries:
    """Read-only aggregates over the ledger and catalog."""

    def __init__(self, catalog: Catalog, ledger: CardLedger, planner: SessionPlanner) -> None:
        self.catalog = catalog
        self.ledger = ledger
        self.planner = planner

    def mastered_count(self) -> int:
        return sum(1 for p in self.ledger if p.is_mastered)

    def learning_count(self) -> int:
        return sum(1 for p in self.ledger if p.level.is_learning)

    def review_count(self, today: date, category: str | None = None) -> int:
        return len(self.planner.get_due_cards(today, category))

    def category_stats(self, category_id: str) -> CategoryStats:
        """Mastered and learning counts over the catalog items of one category."""
        items = self.catalog.in_category(category_id)
        mastered = 0
        learning = 0
        for item in items:
            progress = self.ledger.get(item.id)
            if progress is None:
                continue
            if progress.is_mastered:
                mastered += 1
            elif progress.level.is_learning:
                learning += 1
        return CategoryStats(total=len(items), mastered=mastered, learning=learning)

    def overview(self, today: date, category: str | None = None) -> ProgressOverview:
        return ProgressOverview(
            total_items=len(self.catalog),
            new_count=sum(1 for item in self.catalog if item.id not in self.ledger),
            learning_count=self.learning_count(),
            mastered_count=self.mastered_count(),
            review_count=self.review_count(today, category),
        )
