"""Hosting glue between the synchronous engine and async persistence."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date

from fastapi import Request

from backend.catalog import Catalog
from backend.config import today as utc_today
from backend.engine import EngineSnapshot, LearningEngine
from backend.store import SnapshotStore

logger = logging.getLogger(__name__)


class EngineHost:
    """Owns one LearningEngine and flushes its snapshot after mutations.

    Mutations are serialised with a lock so each one completes, and is
    persisted, before the next is accepted.
    """

    def __init__(self, engine: LearningEngine, store: SnapshotStore) -> None:
        self.engine = engine
        self.store = store
        self.lock = asyncio.Lock()
        self._pending: EngineSnapshot | None = None
        engine.on_change = self._on_change

    @classmethod
    async def open(
        cls,
        catalog: Catalog,
        store: SnapshotStore,
        clock: Callable[[], date] = utc_today,
    ) -> EngineHost:
        """Seed an engine from the stored snapshot."""
        snapshot = await store.load()
        logger.info("Opening engine over %d catalog items", len(catalog))
        return cls(LearningEngine(catalog, snapshot, clock=clock), store)

    def _on_change(self, snapshot: EngineSnapshot) -> None:
        self._pending = snapshot

    @asynccontextmanager
    async def mutate(self) -> AsyncIterator[LearningEngine]:
        """Run a block of engine commands, then persist any change they made."""
        async with self.lock:
            yield self.engine
            await self.flush()

    async def flush(self) -> None:
        if self._pending is None:
            return
        snapshot, self._pending = self._pending, None
        await self.store.save(snapshot)


def get_host(request: Request) -> EngineHost:
    """Return the application's EngineHost for FastAPI dependency injection."""
    return request.app.state.host
