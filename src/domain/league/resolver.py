"""League-block winner resolution."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from domain.common import MatchOutcome
from domain.league.standings import (
    StandingsRow,
    aggregate_standings,
    dedupe_matches,
    rank_standings,
    sort_standings,
)

PLACEHOLDER_NAME = "def"
FINISHED_STATUSES = frozenset({"finished", "done", "complete", "completed"})


class WinnerSource(str, Enum):
    """Where a block winner came from."""

    EXPLICIT = "explicit"
    RANKING = "ranking"
    MATCHES = "matches"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class LeagueBlockWinner:
    player_id: str | None
    source: WinnerSource

    @property
    def is_resolved(self) -> bool:
        return self.player_id is not None


UNRESOLVED = LeagueBlockWinner(player_id=None, source=WinnerSource.UNRESOLVED)


@dataclass(frozen=True)
class BlockStandings:
    """Ranked rows plus the resolved (or unresolved) block winner."""

    rows: tuple[StandingsRow, ...]
    winner: LeagueBlockWinner
    completed_matches: int
    expected_matches: int
    is_complete: bool

    def as_ranking_json(self) -> list[dict]:
        return [row.as_json() for row in self.rows]


def is_placeholder_name(name: str | None) -> bool:
    """True for the reserved bye/no-opponent roster entry."""
    return str(name or "").strip().lower() == PLACEHOLDER_NAME


def is_finished_status(status: str | None) -> bool:
    return str(status or "").strip().lower() in FINISHED_STATUSES


def expected_match_count(participants: int) -> int:
    """Distinct pairings in a single round robin."""
    if participants < 2:
        return 0
    return participants * (participants - 1) // 2


def _unique_top(
    items: Sequence[tuple[str, tuple[int, ...]]],
) -> str | None:
    if not items:
        return None
    ordered = sorted(items, key=lambda item: item[1], reverse=True)
    top_id, top_key = ordered[0]
    if any(key == top_key for _, key in ordered[1:]):
        return None
    return top_id


def infer_winner_from_matches(
    outcomes: Iterable[MatchOutcome],
    placeholders: Collection[str] = (),
) -> str | None:
    """Pick a winner straight from results between real participants.

    Wins, point differential and points scored are accumulated from the
    results alone; the top player counts only if nobody matches them on all
    three.
    """
    stats: dict[str, list[int]] = {}
    for outcome in outcomes:
        if outcome.winner_id in placeholders or outcome.loser_id in placeholders:
            continue
        winner = stats.setdefault(outcome.winner_id, [0, 0, 0])
        loser = stats.setdefault(outcome.loser_id, [0, 0, 0])
        margin = outcome.winner_score - outcome.loser_score
        winner[0] += 1
        winner[1] += margin
        loser[1] -= margin
        winner[2] += outcome.winner_score
        loser[2] += outcome.loser_score

    return _unique_top([(player_id, tuple(values)) for player_id, values in stats.items()])


class StandingsResolver:
    """Computes standings, display ranks and the block winner for one league block."""

    def resolve(
        self,
        matches: Iterable[MatchOutcome],
        roster: Sequence[str],
        *,
        explicit_winner: str | None = None,
        finished: bool = False,
        placeholders: Collection[str] = (),
    ) -> BlockStandings:
        outcomes = dedupe_matches(matches)
        participants = list(dict.fromkeys(player_id for player_id in roster if player_id))
        expected_matches = expected_match_count(len(participants))
        completed_matches = len(outcomes)
        is_complete = (expected_matches > 0 and completed_matches >= expected_matches) or finished

        rows = sort_standings(aggregate_standings(outcomes, participants))
        if len(rows) < 2:
            rows = []
        ranked = tuple(rank_standings(rows))

        return BlockStandings(
            rows=ranked,
            winner=self.resolve_winner(
                ranked,
                outcomes,
                explicit_winner=explicit_winner,
                is_complete=is_complete,
                placeholders=placeholders,
            ),
            completed_matches=completed_matches,
            expected_matches=expected_matches,
            is_complete=is_complete,
        )

    def resolve_winner(
        self,
        rows: Sequence[StandingsRow],
        outcomes: Sequence[MatchOutcome],
        *,
        explicit_winner: str | None,
        is_complete: bool,
        placeholders: Collection[str] = (),
    ) -> LeagueBlockWinner:
        if explicit_winner:
            return LeagueBlockWinner(player_id=explicit_winner, source=WinnerSource.EXPLICIT)
        if not is_complete or not rows:
            return UNRESOLVED

        from_ranking = _unique_top(
            [
                (row.player_id, (row.wins, row.point_diff))
                for row in rows
                if row.player_id not in placeholders
            ]
        )
        if from_ranking is not None:
            return LeagueBlockWinner(player_id=from_ranking, source=WinnerSource.RANKING)

        from_matches = infer_winner_from_matches(outcomes, placeholders)
        if from_matches is not None:
            return LeagueBlockWinner(player_id=from_matches, source=WinnerSource.MATCHES)
        return UNRESOLVED


__all__ = [
    "BlockStandings",
    "FINISHED_STATUSES",
    "LeagueBlockWinner",
    "PLACEHOLDER_NAME",
    "StandingsResolver",
    "WinnerSource",
    "expected_match_count",
    "infer_winner_from_matches",
    "is_finished_status",
    "is_placeholder_name",
]
