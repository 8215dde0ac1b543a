"""Persisted learning state, one row per catalog item."""

from datetime import date

from sqlalchemy import Date, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from backend.models.base import Base, TimestampMixin


class CardProgressRecord(Base, TimestampMixin):
    """Stored form of a CardProgress, keyed by the catalog item id."""

    __tablename__ = "card_progress"

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 0=new .. 5=mastered
    next_review_date: Mapped[date] = mapped_column(Date, nullable=False)
    correct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    incorrect_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_reviewed: Mapped[date | None] = mapped_column(Date, nullable=True)
    ease_factor: Mapped[float] = mapped_column(Float, nullable=False, default=2.5)
