"""Ranking formula configuration with bound clamping."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from domain.config_base import clamp_float, clamp_int, load_toml_file

K_FACTOR_BOUNDS = (10, 64)
SCORE_DIFF_MULTIPLIER_BOUNDS = (0.01, 0.1)
HANDICAP_DIFF_MULTIPLIER_BOUNDS = (0.01, 0.05)
WIN_THRESHOLD_HANDICAP_CHANGE_BOUNDS = (0, 50)
HANDICAP_CHANGE_AMOUNT_BOUNDS = (-10, 10)
TREND_PERIOD_BOUNDS = (1, 60)
TREND_MODES = ("daily", "weekly", "monthly")


@dataclass(frozen=True)
class RankingConfig:
    """Tunable parameters for rating and handicap adjustment.

    Values are clamped to their bounds whenever an instance is built, so a
    ``RankingConfig`` never holds an out-of-range value.
    """

    k_factor: int = 32
    score_diff_multiplier: float = 0.05
    handicap_diff_multiplier: float = 0.02
    win_threshold_handicap_change: int = 10
    handicap_change_amount: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "k_factor", clamp_int(self.k_factor, *K_FACTOR_BOUNDS, 32))
        object.__setattr__(
            self,
            "score_diff_multiplier",
            clamp_float(self.score_diff_multiplier, *SCORE_DIFF_MULTIPLIER_BOUNDS, 0.05),
        )
        object.__setattr__(
            self,
            "handicap_diff_multiplier",
            clamp_float(self.handicap_diff_multiplier, *HANDICAP_DIFF_MULTIPLIER_BOUNDS, 0.02),
        )
        object.__setattr__(
            self,
            "win_threshold_handicap_change",
            clamp_int(self.win_threshold_handicap_change, *WIN_THRESHOLD_HANDICAP_CHANGE_BOUNDS, 10),
        )
        object.__setattr__(
            self,
            "handicap_change_amount",
            clamp_int(self.handicap_change_amount, *HANDICAP_CHANGE_AMOUNT_BOUNDS, 1),
        )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> RankingConfig:
        """Build a config from a flat mapping (database row, request payload or TOML table)."""
        raw = raw or {}
        defaults = cls()
        return cls(
            **{
                field.name: raw.get(field.name, getattr(defaults, field.name))
                for field in fields(cls)
            }
        )

    def clamped(self) -> RankingConfig:
        return replace(self)

    def as_config_json(self) -> dict[str, Any]:
        return {
            "k_factor": self.k_factor,
            "score_diff_multiplier": self.score_diff_multiplier,
            "handicap_diff_multiplier": self.handicap_diff_multiplier,
            "win_threshold_handicap_change": self.win_threshold_handicap_change,
            "handicap_change_amount": self.handicap_change_amount,
        }


@dataclass(frozen=True)
class TrendSettings:
    """Rating-trend window settings stored alongside the ranking formula."""

    daily_days: int = 5
    weekly_weeks: int = 5
    monthly_months: int = 5
    default_mode: str = "daily"

    def __post_init__(self) -> None:
        object.__setattr__(self, "daily_days", clamp_int(self.daily_days, *TREND_PERIOD_BOUNDS, 5))
        object.__setattr__(self, "weekly_weeks", clamp_int(self.weekly_weeks, *TREND_PERIOD_BOUNDS, 5))
        object.__setattr__(
            self,
            "monthly_months",
            clamp_int(self.monthly_months, *TREND_PERIOD_BOUNDS, 5),
        )
        mode = str(self.default_mode or "").strip().lower()
        object.__setattr__(self, "default_mode", mode if mode in TREND_MODES else "daily")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> TrendSettings:
        """Accepts either bare keys (``daily_days``) or column names (``trend_daily_days``)."""
        raw = raw or {}
        defaults = cls()
        values: dict[str, Any] = {}
        for field in fields(cls):
            column = f"trend_{field.name}"
            if column in raw:
                values[field.name] = raw[column]
            else:
                values[field.name] = raw.get(field.name, getattr(defaults, field.name))
        return cls(**values)

    def as_config_json(self) -> dict[str, Any]:
        return {
            "trend_daily_days": self.daily_days,
            "trend_weekly_weeks": self.weekly_weeks,
            "trend_monthly_months": self.monthly_months,
            "trend_default_mode": self.default_mode,
        }


def load_ranking_config(config_path: Path) -> tuple[RankingConfig, TrendSettings]:
    """Load ``[ranking]`` and ``[trend]`` tables from one TOML file."""
    raw = load_toml_file(config_path)
    ranking_raw = raw.get("ranking", {})
    trend_raw = raw.get("trend", {})
    if not isinstance(ranking_raw, dict):
        raise ValueError(f"{config_path}: [ranking] must be a table")
    if not isinstance(trend_raw, dict):
        raise ValueError(f"{config_path}: [trend] must be a table")
    return RankingConfig.from_mapping(ranking_raw), TrendSettings.from_mapping(trend_raw)


__all__ = ["RankingConfig", "TrendSettings", "load_ranking_config"]
