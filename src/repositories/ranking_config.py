"""Persistence helpers for the administrator-editable ranking config row."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.ratings.config import RankingConfig, TrendSettings
from models import RankingConfigRow

GLOBAL_ROW_ID = "global"


def load_ranking_config_row(session: Session) -> RankingConfigRow | None:
    """Return the ``global`` row, else the first row, else ``None``."""
    row = session.get(RankingConfigRow, GLOBAL_ROW_ID)
    if row is not None:
        return row
    return session.execute(select(RankingConfigRow).order_by(RankingConfigRow.id).limit(1)).scalar_one_or_none()


def row_to_config(row: RankingConfigRow) -> tuple[RankingConfig, TrendSettings]:
    """Read a row through the clamping constructors."""
    raw = {
        "k_factor": row.k_factor,
        "score_diff_multiplier": row.score_diff_multiplier,
        "handicap_diff_multiplier": row.handicap_diff_multiplier,
        "win_threshold_handicap_change": row.win_threshold_handicap_change,
        "handicap_change_amount": row.handicap_change_amount,
        "trend_daily_days": row.trend_daily_days,
        "trend_weekly_weeks": row.trend_weekly_weeks,
        "trend_monthly_months": row.trend_monthly_months,
        "trend_default_mode": row.trend_default_mode,
    }
    return RankingConfig.from_mapping(raw), TrendSettings.from_mapping(raw)


def save_ranking_config(
    session: Session,
    config: RankingConfig,
    trend: TrendSettings | None = None,
) -> RankingConfigRow:
    """Upsert the ``global`` row with clamped values.

    Without ``trend`` an existing row keeps its trend settings and a new row gets the defaults.
    """
    values = config.clamped().as_config_json()
    row = session.get(RankingConfigRow, GLOBAL_ROW_ID)
    if trend is not None or row is None:
        values.update((trend or TrendSettings()).as_config_json())
    if row is None:
        row = RankingConfigRow(id=GLOBAL_ROW_ID, **values)
        session.add(row)
    else:
        for key, value in values.items():
            setattr(row, key, value)
    row.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()
    return row


__all__ = ["GLOBAL_ROW_ID", "load_ranking_config_row", "row_to_config", "save_ranking_config"]
