from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.models.base import Base, TimestampMixin


class LearnerSettings(Base, TimestampMixin):
    __tablename__ = "learner_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    selected_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
