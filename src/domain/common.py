"""Shared records passed between the persistence layer and the ranking calculators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class PlayerRatingState:
    """One player's ranking-relevant attributes at the moment a match is scored."""

    rating: float
    handicap: int


@dataclass(frozen=True)
class MatchOutcome:
    """Canonical scored-match payload used by the rating calculator and the standings resolver."""

    winner_id: str
    loser_id: str
    winner_score: int
    loser_score: int
    recorded_at: datetime | None = None
    match_id: str | None = None

    @property
    def pair_key(self) -> frozenset[str]:
        return frozenset((self.winner_id, self.loser_id))


class EndReason(str, Enum):
    """How a match finished."""

    NORMAL = "normal"
    TIME_LIMIT = "time_limit"
    WALKOVER = "walkover"
    FORFEIT = "forfeit"

    @classmethod
    def parse(cls, value: object) -> EndReason:
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return cls.NORMAL

    @property
    def affects_rating(self) -> bool:
        # Only matches played to the end move ranking points and handicaps.
        return self is EndReason.NORMAL


__all__ = ["EndReason", "MatchOutcome", "PlayerRatingState"]
