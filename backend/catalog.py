"""Read-only vocabulary catalog.

The catalog is loaded once at startup and never changes afterwards.
Item order in the source document is significant: due and new cards are
always offered in catalog order.
"""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a catalog document is malformed."""


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: str = ""
    icon: str = ""


@dataclass(frozen=True)
class LearnableItem:
    """One vocabulary prompt with a stable id."""

    id: int
    prompt_text: str  # Shown to the learner (Indonesian)
    target_text: str  # What the learner should say (English)
    category: str
    difficulty: str = "medium"  # easy, medium, hard
    timer_seconds: int | None = None


class Catalog:
    """An ordered, immutable collection of learnable items."""

    def __init__(
        self,
        items: list[LearnableItem] | tuple[LearnableItem, ...],
        categories: list[Category] | tuple[Category, ...] = (),
    ) -> None:
        self._items = tuple(items)
        self._categories = tuple(categories)
        self._by_id: dict[int, LearnableItem] = {}
        for item in self._items:
            if item.id in self._by_id:
                raise CatalogError(f"Duplicate item id {item.id}")
            self._by_id[item.id] = item

    def __iter__(self) -> Iterator[LearnableItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    @property
    def items(self) -> tuple[LearnableItem, ...]:
        return self._items

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    def get(self, item_id: int) -> LearnableItem | None:
        return self._by_id.get(item_id)

    def in_category(self, category: str | None) -> list[LearnableItem]:
        """Items matching ``category`` in catalog order (all items when None)."""
        if category is None:
            return list(self._items)
        return [item for item in self._items if item.category == category]

    @classmethod
    def from_dict(cls, data: dict) -> "Catalog":
        """Build a catalog from a ``{"categories": [...], "vocabulary": [...]}`` document."""
        try:
            categories = [
                Category(
                    id=c["id"],
                    name=c.get("name", c["id"]),
                    description=c.get("description", ""),
                    icon=c.get("icon", ""),
                )
                for c in data.get("categories", [])
            ]
            items = [
                LearnableItem(
                    id=int(v["id"]),
                    prompt_text=v["indonesian"],
                    target_text=v["english"],
                    category=v["category"],
                    difficulty=v.get("difficulty", "medium"),
                    timer_seconds=v.get("timerSeconds"),
                )
                for v in data["vocabulary"]
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed catalog entry: {e}") from e
        return cls(items, categories)


def load_catalog(path: Path) -> Catalog:
    """Load the catalog from a JSON file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {path} is not valid JSON: {e}") from e

    catalog = Catalog.from_dict(data)
    logger.info(
        "Loaded catalog from %s: %d items in %d categories",
        path,
        len(catalog),
        len(catalog.categories),
    )
    return catalog
