"""Snapshot persistence for the learning engine.

The engine itself only knows about in-memory state. The host loads a
snapshot at startup and writes it back after every mutation; each save is
one transaction, so a CardProgress row is always written whole and the
latest save wins per item id.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.engine import EngineSnapshot
from backend.models.card_progress import CardProgressRecord
from backend.models.learner_settings import LearnerSettings
from backend.srs.scheduling import CardLevel, CardProgress

logger = logging.getLogger(__name__)


def to_record(progress: CardProgress) -> CardProgressRecord:
    return CardProgressRecord(
        item_id=progress.item_id,
        level=int(progress.level),
        next_review_date=progress.next_review_date,
        correct_count=progress.correct_count,
        incorrect_count=progress.incorrect_count,
        last_reviewed=progress.last_reviewed,
        ease_factor=progress.ease_factor,
    )


def from_record(record: CardProgressRecord) -> CardProgress:
    return CardProgress(
        item_id=record.item_id,
        level=CardLevel(record.level),
        next_review_date=record.next_review_date,
        correct_count=record.correct_count,
        incorrect_count=record.incorrect_count,
        last_reviewed=record.last_reviewed,
        ease_factor=record.ease_factor,
    )


class SnapshotStore:
    """Loads and saves EngineSnapshots through SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def load(self) -> EngineSnapshot:
        """Read the saved snapshot (an empty one if nothing was saved yet)."""
        async with self.session_factory() as db:
            records = (await db.execute(select(CardProgressRecord))).scalars().all()
            learner = (await db.execute(select(LearnerSettings).limit(1))).scalar_one_or_none()

        snapshot = EngineSnapshot(
            card_progress={r.item_id: from_record(r) for r in records},
            selected_category=learner.selected_category if learner else None,
        )
        logger.info("Loaded snapshot: %d cards in progress", len(snapshot.card_progress))
        return snapshot

    async def save(self, snapshot: EngineSnapshot) -> None:
        """Write ``snapshot`` back, replacing whatever was stored before."""
        async with self.session_factory() as db:
            ids = list(snapshot.card_progress)
            # Rows missing from the snapshot were dropped by a ledger reset
            stale = delete(CardProgressRecord)
            if ids:
                stale = stale.where(CardProgressRecord.item_id.not_in(ids))
            await db.execute(stale)

            for progress in snapshot.card_progress.values():
                await db.merge(to_record(progress))

            learner = (await db.execute(select(LearnerSettings).limit(1))).scalar_one_or_none()
            if learner is None:
                learner = LearnerSettings()
                db.add(learner)
            learner.selected_category = snapshot.selected_category

            await db.commit()
        logger.debug("Saved snapshot: %d cards", len(snapshot.card_progress))
