"""ranking_config table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class RankingConfigRow(Base):
    """Administrator-editable ranking formula; the live row has id ``global``."""

    __tablename__ = "ranking_config"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default="global")
    k_factor: Mapped[int] = mapped_column(Integer, nullable=False)
    score_diff_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    handicap_diff_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    win_threshold_handicap_change: Mapped[int] = mapped_column(Integer, nullable=False)
    handicap_change_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    trend_daily_days: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    trend_weekly_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    trend_monthly_months: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    trend_default_mode: Mapped[str] = mapped_column(String(16), nullable=False, default="daily")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
