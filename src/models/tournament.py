"""tournaments table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Tournament(Base):
    __tablename__ = "tournaments"
    __table_args__ = (
        CheckConstraint("bonus_coefficient > 0", name="ck_tournaments_bonus_coefficient"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    bonus_coefficient: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
