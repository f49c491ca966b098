"""Tests for league-block winner resolution."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from domain.common import MatchOutcome
from domain.league.resolver import (
    UNRESOLVED,
    StandingsResolver,
    WinnerSource,
    expected_match_count,
    infer_winner_from_matches,
    is_finished_status,
    is_placeholder_name,
)

T0 = datetime(2026, 3, 1, 10, 0, 0)


def _matches(*results: tuple[str, str, int, int]) -> list[MatchOutcome]:
    return [
        MatchOutcome(
            winner_id=winner_id,
            loser_id=loser_id,
            winner_score=winner_score,
            loser_score=loser_score,
            recorded_at=T0 + timedelta(minutes=index),
        )
        for index, (winner_id, loser_id, winner_score, loser_score) in enumerate(results)
    ]


def test_round_robin_winner_from_ranking() -> None:
    standings = StandingsResolver().resolve(
        _matches(("a", "b", 15, 10), ("a", "c", 15, 8), ("b", "c", 15, 12)),
        ["a", "b", "c"],
    )
    assert standings.is_complete
    assert standings.completed_matches == standings.expected_matches == 3
    assert standings.winner.player_id == "a"
    assert standings.winner.source is WinnerSource.RANKING
    assert [row.player_id for row in standings.rows] == ["a", "b", "c"]


def test_explicit_winner_overrides_standings() -> None:
    standings = StandingsResolver().resolve(
        _matches(("a", "b", 15, 3)),
        ["a", "b"],
        explicit_winner="b",
    )
    assert standings.winner.player_id == "b"
    assert standings.winner.source is WinnerSource.EXPLICIT
    assert standings.rows[0].player_id == "a"


def test_explicit_winner_is_not_validated() -> None:
    standings = StandingsResolver().resolve([], ["a", "b", "c"], explicit_winner="outsider")
    assert standings.winner.player_id == "outsider"
    assert not standings.is_complete


def test_incomplete_block_is_unresolved() -> None:
    standings = StandingsResolver().resolve(
        _matches(("a", "b", 15, 10), ("a", "c", 15, 8)),
        ["a", "b", "c"],
    )
    assert not standings.is_complete
    assert standings.winner == UNRESOLVED
    assert not standings.winner.is_resolved
    assert [row.player_id for row in standings.rows] == ["a", "b", "c"]


def test_finished_flag_allows_resolution_of_incomplete_block() -> None:
    standings = StandingsResolver().resolve(
        _matches(("a", "b", 15, 10), ("a", "c", 15, 8)),
        ["a", "b", "c"],
        finished=True,
    )
    assert standings.is_complete
    assert standings.winner.player_id == "a"


def test_tie_at_top_falls_back_to_match_inference() -> None:
    # Everyone is 1-1 with zero differential; b has the most points scored.
    standings = StandingsResolver().resolve(
        _matches(("a", "b", 15, 10), ("b", "c", 15, 10), ("c", "a", 12, 7)),
        ["a", "b", "c"],
    )
    assert standings.winner.player_id == "b"
    assert standings.winner.source is WinnerSource.MATCHES


def test_full_tie_is_unresolved() -> None:
    standings = StandingsResolver().resolve(
        _matches(("a", "b", 15, 10), ("b", "c", 15, 10), ("c", "a", 15, 10)),
        ["a", "b", "c"],
    )
    assert standings.is_complete
    assert standings.winner == UNRESOLVED
    assert [row.rank for row in standings.rows] == [1, 1, 1]


def test_placeholder_cannot_win_from_ranking() -> None:
    standings = StandingsResolver().resolve(
        _matches(("bye", "a", 15, 0), ("bye", "b", 15, 0), ("a", "b", 15, 9)),
        ["a", "b", "bye"],
        placeholders={"bye"},
    )
    assert standings.rows[0].player_id == "bye"
    assert standings.completed_matches == 3
    assert standings.winner.player_id == "a"
    assert standings.winner.source is WinnerSource.RANKING


def test_match_inference_ignores_placeholder_results() -> None:
    outcomes = _matches(("bye", "a", 15, 0), ("bye", "b", 15, 0), ("a", "b", 15, 3))
    assert infer_winner_from_matches(outcomes) == "bye"
    assert infer_winner_from_matches(outcomes, {"bye"}) == "a"
    assert infer_winner_from_matches([]) is None


@pytest.mark.parametrize("roster", [[], ["a"], ["", "a"]])
def test_degenerate_roster_returns_empty_rows(roster: list[str]) -> None:
    standings = StandingsResolver().resolve([], roster, finished=True)
    assert standings.rows == ()
    assert standings.winner == UNRESOLVED
    assert standings.expected_matches == 0
    assert standings.as_ranking_json() == []


def test_duplicate_results_count_once_toward_completeness() -> None:
    standings = StandingsResolver().resolve(
        _matches(("a", "b", 15, 10), ("a", "b", 15, 5), ("b", "a", 15, 14)),
        ["a", "b", "c"],
    )
    assert standings.completed_matches == 1
    assert standings.rows[0].player_id == "b"


def test_resolve_is_idempotent() -> None:
    matches = _matches(("a", "b", 15, 10), ("c", "a", 15, 8), ("b", "c", 15, 12))
    resolver = StandingsResolver()
    assert resolver.resolve(matches, ["a", "b", "c"]) == resolver.resolve(matches, ["a", "b", "c"])


def test_ranking_json_payload() -> None:
    standings = StandingsResolver().resolve(_matches(("a", "b", 15, 6)), ["a", "b"])
    assert standings.as_ranking_json() == [
        {"player_id": "a", "wins": 1, "losses": 0, "points_for": 15, "points_against": 6, "point_diff": 9, "rank": 1},
        {"player_id": "b", "wins": 0, "losses": 1, "points_for": 6, "points_against": 15, "point_diff": -9, "rank": 2},
    ]


def test_helpers() -> None:
    assert expected_match_count(0) == 0
    assert expected_match_count(1) == 0
    assert expected_match_count(4) == 6
    assert is_finished_status(" Finished ")
    assert is_finished_status("completed")
    assert not is_finished_status("in_progress")
    assert not is_finished_status(None)
    assert is_placeholder_name("DEF")
    assert not is_placeholder_name("defender")
