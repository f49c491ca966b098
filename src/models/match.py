"""matches table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Match(Base):
    """One singles match, scheduled or reported, with the rating deltas it applied."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint(
            "winner_score IS NULL OR loser_score IS NULL OR winner_score > loser_score",
            name="ck_matches_winner_score",
        ),
        Index("idx_matches_league_block", "league_block_id"),
        Index("idx_matches_players", "player_a_id", "player_b_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tournament_id: Mapped[str | None] = mapped_column(ForeignKey("tournaments.id"), nullable=True)
    league_block_id: Mapped[str | None] = mapped_column(ForeignKey("league_blocks.id"), nullable=True)
    player_a_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    player_b_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    winner_id: Mapped[str | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    loser_id: Mapped[str | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    winner_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loser_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    end_reason: Mapped[str] = mapped_column(String(32), nullable=False, default="normal")
    affects_rating: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    winner_rating_delta: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    loser_rating_delta: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    winner_handicap_delta: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    loser_handicap_delta: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="scheduled")
    played_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
