"""Rating and handicap adjustment."""

from domain.ratings.calculator import (
    RatingAdjustment,
    RatingAdjustmentCalculator,
    RatingDeltaComponents,
    calculate_expected_score,
    rating_delta_components,
)
from domain.ratings.config import RankingConfig, TrendSettings, load_ranking_config

__all__ = [
    "RankingConfig",
    "RatingAdjustment",
    "RatingAdjustmentCalculator",
    "RatingDeltaComponents",
    "TrendSettings",
    "calculate_expected_score",
    "load_ranking_config",
    "rating_delta_components",
]
