"""SQLAlchemy ORM models for the SvaraLab database."""

from backend.models.base import Base
from backend.models.card_progress import CardProgressRecord
from backend.models.learner_settings import LearnerSettings

__all__ = ["Base", "CardProgressRecord", "LearnerSettings"]
