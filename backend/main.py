"""FastAPI application entry point and configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from backend.api.game_router import router as game_router
from backend.api.session_router import router as session_router
from backend.api.stats_router import router as stats_router
from backend.api.vocab_router import router as vocab_router
from backend.catalog import load_catalog
from backend.config import settings
from backend.database import async_session, engine, init_db
from backend.host import EngineHost
from backend.store import SnapshotStore


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the database and the learning engine on startup."""
    await init_db()
    catalog = load_catalog(settings.catalog_path)
    app.state.host = await EngineHost.open(catalog, SnapshotStore(async_session))
    yield
    await app.state.host.flush()
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Spaced repetition and adaptive pacing for spoken English practice",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8081", "http://localhost:3000"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(vocab_router)
app.include_router(session_router)
app.include_router(game_router)
app.include_router(stats_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Check database connectivity and return status."""
    async with async_session() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ok"}
