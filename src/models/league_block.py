"""league_blocks and league_block_members table models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, JSONType


class LeagueBlock(Base):
    """Round-robin group of a tournament, with its cached standings and optional winner override."""

    __tablename__ = "league_blocks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tournament_id: Mapped[str | None] = mapped_column(ForeignKey("tournaments.id"), nullable=True)
    label: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="pending")
    winner_player_id: Mapped[str | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    ranking_json: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class LeagueBlockMember(Base):
    """Roster entry of one league block."""

    __tablename__ = "league_block_members"
    __table_args__ = (
        UniqueConstraint("block_id", "player_id", name="uq_league_block_member"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    block_id: Mapped[str] = mapped_column(ForeignKey("league_blocks.id"), nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    seed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
