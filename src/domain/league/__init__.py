"""League-block standings and winner resolution."""

from domain.league.resolver import (
    BlockStandings,
    LeagueBlockWinner,
    StandingsResolver,
    WinnerSource,
    infer_winner_from_matches,
    is_finished_status,
    is_placeholder_name,
)
from domain.league.standings import (
    StandingsRow,
    aggregate_standings,
    dedupe_matches,
    rank_standings,
    rows_from_ranking_json,
    sort_standings,
)

__all__ = [
    "BlockStandings",
    "LeagueBlockWinner",
    "StandingsResolver",
    "StandingsRow",
    "WinnerSource",
    "aggregate_standings",
    "dedupe_matches",
    "infer_winner_from_matches",
    "is_finished_status",
    "is_placeholder_name",
    "rank_standings",
    "rows_from_ranking_json",
    "sort_standings",
]
