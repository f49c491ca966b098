"""Elo-style rating and handicap adjustment for one scored match."""

from __future__ import annotations

import math
from dataclasses import dataclass

from domain.common import PlayerRatingState
from domain.config_base import clamp_float
from domain.ratings.config import RankingConfig

ELO_SCALE_FACTOR = 400.0
# Score and handicap gaps past this are treated as this.
MAX_TERM_GAP = 1000.0


@dataclass(frozen=True)
class RatingDeltaComponents:
    """Winner-side rating delta split into its three terms; the loser gets the negation of each."""

    base: float
    margin: float
    handicap: float

    @property
    def total(self) -> float:
        return self.base + self.margin + self.handicap


@dataclass(frozen=True)
class RatingAdjustment:
    winner_rating: float
    loser_rating: float
    winner_handicap: int
    loser_handicap: int
    winner_rating_delta: float
    loser_rating_delta: float
    winner_handicap_delta: int
    loser_handicap_delta: int
    expected_score: float

    @classmethod
    def unchanged(cls, winner: PlayerRatingState, loser: PlayerRatingState) -> RatingAdjustment:
        """Adjustment for results that do not move ratings (walkovers, forfeits, ...)."""
        return cls(
            winner_rating=winner.rating,
            loser_rating=loser.rating,
            winner_handicap=winner.handicap,
            loser_handicap=loser.handicap,
            winner_rating_delta=0.0,
            loser_rating_delta=0.0,
            winner_handicap_delta=0,
            loser_handicap_delta=0,
            expected_score=calculate_expected_score(winner.rating, loser.rating),
        )


def _as_float(value: object, fallback: float = 0.0) -> float:
    return clamp_float(value, -math.inf, math.inf, fallback)


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    scale_factor: float = ELO_SCALE_FACTOR,
) -> float:
    """Compute the Elo expected score for one side."""
    gap = _as_float(opponent_rating - rating)
    # Keep 10**exponent finite for absurd rating gaps.
    exponent = max(-300.0, min(gap / scale_factor, 300.0))
    return 1.0 / (1.0 + 10.0**exponent)


def rating_delta_components(
    winner: PlayerRatingState,
    loser: PlayerRatingState,
    winner_score: int,
    loser_score: int,
    config: RankingConfig,
) -> RatingDeltaComponents:
    """Return the winner's base, margin-of-victory and handicap-gap rating terms.

    All three terms scale with ``k_factor * (1 - expected)``, so an upset moves
    ratings further than a win by the favourite. The handicap term is positive
    when the winner carries the larger handicap (beat a stronger opponent) and
    negative when the loser does.
    """
    expected = calculate_expected_score(winner.rating, loser.rating)
    swing = config.k_factor * (1.0 - expected)
    margin = clamp_float(winner_score - loser_score, 0.0, MAX_TERM_GAP, 0.0)
    handicap_gap = clamp_float(winner.handicap - loser.handicap, -MAX_TERM_GAP, MAX_TERM_GAP, 0.0)
    return RatingDeltaComponents(
        base=swing,
        margin=swing * config.score_diff_multiplier * margin,
        handicap=swing * config.handicap_diff_multiplier * handicap_gap,
    )


class RatingAdjustmentCalculator:
    """Stateless rating/handicap calculator bound to one ranking config."""

    def __init__(self, config: RankingConfig | None = None) -> None:
        self.config = config or RankingConfig()

    def handicap_deltas(self, winner_score: int, loser_score: int) -> tuple[int, int]:
        """Return ``(winner_delta, loser_delta)``; a wide enough margin moves the loser's handicap."""
        if winner_score - loser_score >= self.config.win_threshold_handicap_change:
            return 0, self.config.handicap_change_amount
        return 0, 0

    def process_match(
        self,
        winner: PlayerRatingState,
        loser: PlayerRatingState,
        winner_score: int,
        loser_score: int,
        *,
        bonus_coefficient: float = 1.0,
    ) -> RatingAdjustment:
        bonus_coefficient = _as_float(bonus_coefficient, fallback=1.0)
        if not math.isfinite(bonus_coefficient) or bonus_coefficient <= 0.0:
            bonus_coefficient = 1.0

        components = rating_delta_components(winner, loser, winner_score, loser_score, self.config)
        winner_delta = components.total * bonus_coefficient
        loser_delta = -winner_delta
        winner_handicap_delta, loser_handicap_delta = self.handicap_deltas(winner_score, loser_score)

        return RatingAdjustment(
            winner_rating=_as_float(winner.rating) + winner_delta,
            loser_rating=_as_float(loser.rating) + loser_delta,
            winner_handicap=winner.handicap + winner_handicap_delta,
            loser_handicap=loser.handicap + loser_handicap_delta,
            winner_rating_delta=winner_delta,
            loser_rating_delta=loser_delta,
            winner_handicap_delta=winner_handicap_delta,
            loser_handicap_delta=loser_handicap_delta,
            expected_score=calculate_expected_score(winner.rating, loser.rating),
        )


__all__ = [
    "ELO_SCALE_FACTOR",
    "RatingAdjustment",
    "RatingAdjustmentCalculator",
    "RatingDeltaComponents",
    "calculate_expected_score",
    "rating_delta_components",
]
