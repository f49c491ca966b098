"""League-block standings aggregation and display ranking."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from domain.common import MatchOutcome

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StandingsRow:
    """One participant's aggregated record within a league block."""

    player_id: str
    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0
    rank: int | None = None

    @property
    def point_diff(self) -> int:
        return self.points_for - self.points_against

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.wins, self.point_diff, self.points_for)

    def as_json(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "wins": self.wins,
            "losses": self.losses,
            "points_for": self.points_for,
            "points_against": self.points_against,
            "point_diff": self.point_diff,
            "rank": self.rank,
        }


def is_completed(outcome: MatchOutcome) -> bool:
    """True for a fully scored, well-formed result."""
    if not outcome.winner_id or not outcome.loser_id:
        return False
    if outcome.winner_id == outcome.loser_id:
        return False
    for score in (outcome.winner_score, outcome.loser_score):
        if not isinstance(score, int) or isinstance(score, bool) or score < 0:
            return False
    return outcome.winner_score > outcome.loser_score


def dedupe_matches(outcomes: Iterable[MatchOutcome]) -> list[MatchOutcome]:
    """Keep only the latest completed result for each unordered player pair.

    Rows without a timestamp are older than any timestamped row; equal
    timestamps resolve to the row that comes later in the input. Output keeps
    the order in which pairs first appear.
    """
    latest: dict[frozenset[str], tuple[tuple[bool, datetime, int], MatchOutcome]] = {}
    first_seen: list[frozenset[str]] = []
    for position, outcome in enumerate(outcomes):
        if not is_completed(outcome):
            LOGGER.debug("Skipping incomplete or malformed match row: %s", outcome)
            continue
        key = outcome.pair_key
        order = (outcome.recorded_at is not None, _naive_utc(outcome.recorded_at), position)
        current = latest.get(key)
        if current is None:
            first_seen.append(key)
            latest[key] = (order, outcome)
            continue
        if order > current[0]:
            latest[key] = (order, outcome)
    return [latest[key][1] for key in first_seen]


def _naive_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.min
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def aggregate_standings(outcomes: Iterable[MatchOutcome], roster: Sequence[str]) -> list[StandingsRow]:
    """Accumulate wins, losses and points per player over already-deduplicated results.

    Every roster player gets a row even without results; players that only
    appear in results are appended in first-appearance order.
    """
    totals: dict[str, list[int]] = {}
    for player_id in roster:
        if player_id and player_id not in totals:
            totals[player_id] = [0, 0, 0, 0]

    for outcome in outcomes:
        if not is_completed(outcome):
            continue
        winner = totals.setdefault(outcome.winner_id, [0, 0, 0, 0])
        loser = totals.setdefault(outcome.loser_id, [0, 0, 0, 0])
        winner[0] += 1
        loser[1] += 1
        winner[2] += outcome.winner_score
        winner[3] += outcome.loser_score
        loser[2] += outcome.loser_score
        loser[3] += outcome.winner_score

    return [
        StandingsRow(
            player_id=player_id,
            wins=wins,
            losses=losses,
            points_for=points_for,
            points_against=points_against,
        )
        for player_id, (wins, losses, points_for, points_against) in totals.items()
    ]


def sort_standings(rows: Iterable[StandingsRow]) -> list[StandingsRow]:
    """Order by wins, then point differential, then points scored; ties keep input order."""
    return sorted(rows, key=lambda row: row.sort_key, reverse=True)


def is_undecided(rows: Sequence[StandingsRow]) -> bool:
    """True when no completed result separates anyone (same record, zero differential)."""
    if not rows:
        return False
    base = rows[0]
    return all(
        row.wins == base.wins and row.losses == base.losses and row.point_diff == 0
        for row in rows
    )


def rank_standings(rows: Sequence[StandingsRow]) -> list[StandingsRow]:
    """Attach 1-based display ranks to already-sorted rows."""
    if is_undecided(rows):
        return [replace(row, rank=1) for row in rows]
    return [replace(row, rank=index) for index, row in enumerate(rows, start=1)]


def rows_from_ranking_json(payload: Iterable[Mapping[str, Any]] | None) -> list[StandingsRow]:
    """Rebuild rows from a persisted standings cache.

    The differential is always recomputed from points for/against; a stored
    ``point_diff`` that disagrees is ignored.
    """
    rows: list[StandingsRow] = []
    for item in payload or ():
        if not isinstance(item, Mapping):
            continue
        player_id = str(item.get("player_id") or "").strip()
        if not player_id:
            continue
        row = StandingsRow(
            player_id=player_id,
            wins=_as_int(item.get("wins")),
            losses=_as_int(item.get("losses")),
            points_for=_as_int(item.get("points_for")),
            points_against=_as_int(item.get("points_against")),
        )
        stored_diff = item.get("point_diff")
        if stored_diff is not None and _as_int(stored_diff) != row.point_diff:
            LOGGER.warning(
                "Stored point_diff=%s for player_id=%s disagrees with recomputed %s; using recomputed value",
                stored_diff,
                player_id,
                row.point_diff,
            )
        rows.append(row)
    return rows


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


__all__ = [
    "StandingsRow",
    "aggregate_standings",
    "dedupe_matches",
    "is_completed",
    "is_undecided",
    "rank_standings",
    "rows_from_ranking_json",
    "sort_standings",
]
