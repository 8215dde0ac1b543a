from datetime import UTC, date, datetime
from pathlib import Path

from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Keeps datetimes naive so they stay compatible with SQLite
    (which doesn't store tz info).
    """
    return datetime.now(UTC).replace(tzinfo=None)


def today() -> date:
    """Return the current UTC calendar date.

    Review scheduling works at day granularity, so every "today" the
    engine sees comes from here unless a caller injects its own clock.
    """
    return utcnow().date()


class Settings(BaseSettings):
    app_name: str = "SvaraLab"
    database_url: str = f"sqlite+aiosqlite:///{PROJECT_ROOT / 'data' / 'svaralab.db'}"
    catalog_path: Path = PROJECT_ROOT / "data" / "vocabulary.json"
    session_size: int = 15
    max_due_per_session: int = 10
    default_new_card_limit: int = 10
    initial_difficulty: int = 5
    debug: bool = False

    model_config = {"env_prefix": "SVARALAB_", "env_file": ".env"}


settings = Settings()
