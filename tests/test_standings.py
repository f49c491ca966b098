"""Unit tests for league-block standings aggregation and ranking."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from domain.common import MatchOutcome
from domain.league.standings import (
    StandingsRow,
    aggregate_standings,
    dedupe_matches,
    is_completed,
    rank_standings,
    rows_from_ranking_json,
    sort_standings,
)

T0 = datetime(2026, 3, 1, 10, 0, 0)


def _outcome(
    winner_id: str,
    loser_id: str,
    loser_score: int,
    *,
    winner_score: int = 15,
    minutes: int | None = 0,
) -> MatchOutcome:
    return MatchOutcome(
        winner_id=winner_id,
        loser_id=loser_id,
        winner_score=winner_score,
        loser_score=loser_score,
        recorded_at=None if minutes is None else T0 + timedelta(minutes=minutes),
    )


def _ranked(outcomes: list[MatchOutcome], roster: list[str]) -> list[StandingsRow]:
    return rank_standings(sort_standings(aggregate_standings(dedupe_matches(outcomes), roster)))


def test_three_player_round_robin() -> None:
    rows = _ranked(
        [
            _outcome("a", "b", 10, minutes=0),
            _outcome("a", "c", 8, minutes=1),
            _outcome("b", "c", 12, minutes=2),
        ],
        ["a", "b", "c"],
    )

    assert [row.player_id for row in rows] == ["a", "b", "c"]
    assert [row.rank for row in rows] == [1, 2, 3]
    a, b, c = rows
    assert (a.wins, a.losses, a.points_for, a.points_against, a.point_diff) == (2, 0, 30, 18, 12)
    assert (b.wins, b.losses, b.points_for, b.points_against, b.point_diff) == (1, 1, 25, 27, -2)
    assert (c.wins, c.losses, c.points_for, c.points_against, c.point_diff) == (0, 2, 20, 30, -10)


def test_corrected_resubmission_replaces_earlier_result() -> None:
    first_entry = _outcome("a", "b", 10, minutes=0)
    corrected = _outcome("a", "b", 5, minutes=30)

    rows = _ranked([first_entry, corrected], ["a", "b"])
    assert rows == _ranked([corrected], ["a", "b"])
    a, b = rows
    assert (a.points_for, a.points_against) == (15, 5)
    assert (b.points_for, b.points_against) == (5, 15)
    assert a.wins == 1 and b.losses == 1


def test_dedupe_keeps_latest_regardless_of_input_order() -> None:
    older = _outcome("b", "a", 9, minutes=0)
    newer = _outcome("a", "b", 14, minutes=5)
    assert dedupe_matches([newer, older]) == [newer]
    assert dedupe_matches([older, newer]) == [newer]


def test_dedupe_timestamp_edge_cases() -> None:
    untimed = _outcome("a", "b", 3, minutes=None)
    timed = _outcome("a", "b", 4, minutes=0)
    assert dedupe_matches([timed, untimed]) == [timed]

    same_time_first = _outcome("a", "b", 1, minutes=0)
    same_time_second = _outcome("b", "a", 2, minutes=0)
    assert dedupe_matches([same_time_first, same_time_second]) == [same_time_second]

    aware = MatchOutcome("a", "b", 15, 6, recorded_at=datetime(2026, 3, 1, 11, 0, tzinfo=timezone.utc))
    naive = _outcome("a", "b", 7, minutes=30)
    assert dedupe_matches([aware, naive]) == [aware]


def test_dedupe_skips_malformed_rows() -> None:
    valid = _outcome("a", "b", 3)
    assert dedupe_matches(
        [
            MatchOutcome("a", "a", 15, 3),
            MatchOutcome("a", "", 15, 3),
            MatchOutcome("a", "c", 10, 12),
            MatchOutcome("a", "c", 15, -1),
            valid,
        ]
    ) == [valid]
    assert not is_completed(MatchOutcome("a", "b", 15, 15))


def test_wins_and_losses_each_equal_match_count() -> None:
    outcomes = dedupe_matches(
        [
            _outcome("a", "b", 3, minutes=0),
            _outcome("c", "d", 13, minutes=1),
            _outcome("d", "a", 11, minutes=2),
            _outcome("b", "c", 0, minutes=3),
            _outcome("a", "b", 7, minutes=4),
        ]
    )
    rows = aggregate_standings(outcomes, ["a", "b", "c", "d"])
    assert len(outcomes) == 4
    assert sum(row.wins for row in rows) == len(outcomes)
    assert sum(row.losses for row in rows) == len(outcomes)
    assert sum(row.point_diff for row in rows) == 0


def test_roster_players_without_matches_keep_zero_rows() -> None:
    rows = aggregate_standings([_outcome("a", "b", 3)], ["a", "b", "idle"])
    idle = next(row for row in rows if row.player_id == "idle")
    assert idle == StandingsRow(player_id="idle")


def test_no_results_gives_everyone_rank_one() -> None:
    rows = _ranked([], ["a", "b", "c"])
    assert [row.rank for row in rows] == [1, 1, 1]
    assert [row.player_id for row in rows] == ["a", "b", "c"]


def test_full_tie_with_zero_diff_shares_rank_one() -> None:
    rows = _ranked(
        [
            _outcome("a", "b", 10, minutes=0),
            _outcome("b", "c", 10, minutes=1),
            _outcome("c", "a", 10, minutes=2),
        ],
        ["a", "b", "c"],
    )
    assert [row.player_id for row in rows] == ["a", "b", "c"]
    assert [row.rank for row in rows] == [1, 1, 1]


def test_tie_on_wins_with_nonzero_diff_keeps_sequential_ranks() -> None:
    rows = _ranked(
        [
            _outcome("a", "b", 2, minutes=0),
            _outcome("b", "c", 10, minutes=1),
            _outcome("c", "a", 12, minutes=2),
        ],
        ["a", "b", "c"],
    )
    assert [row.player_id for row in rows] == ["a", "c", "b"]
    assert [row.rank for row in rows] == [1, 2, 3]


def test_sort_order_and_stable_ties() -> None:
    rows = [
        StandingsRow("low", wins=1, points_for=20, points_against=25),
        StandingsRow("first_tie", wins=2, points_for=30, points_against=20),
        StandingsRow("more_points", wins=2, points_for=40, points_against=30),
        StandingsRow("second_tie", wins=2, points_for=30, points_against=20),
    ]
    assert [row.player_id for row in sort_standings(rows)] == [
        "more_points",
        "first_tie",
        "second_tie",
        "low",
    ]


def test_aggregation_is_idempotent() -> None:
    outcomes = [_outcome("a", "b", 10), _outcome("c", "a", 11, minutes=1)]
    assert _ranked(outcomes, ["a", "b", "c"]) == _ranked(outcomes, ["a", "b", "c"])


def test_rows_from_ranking_json_recomputes_point_diff(caplog: pytest.LogCaptureFixture) -> None:
    payload = [
        {"player_id": "a", "wins": 2, "losses": 0, "points_for": 30, "points_against": 12, "point_diff": 99},
        {"player_id": "b", "wins": "1", "losses": 1, "points_for": 20, "points_against": 25},
        {"player_id": "", "wins": 5},
        {"player_id": "c", "wins": float("inf"), "losses": float("-inf"), "points_for": float("nan")},
        "not a row",
    ]
    with caplog.at_level(logging.WARNING, logger="domain.league.standings"):
        rows = rows_from_ranking_json(payload)

    assert [row.player_id for row in rows] == ["a", "b", "c"]
    assert rows[0].point_diff == 18
    assert rows[2] == StandingsRow(player_id="c")
    assert rows[1].wins == 1
    assert rows[1].point_diff == -5
    assert "point_diff=99" in caplog.text


def test_rows_from_ranking_json_round_trips_cached_rows() -> None:
    rows = _ranked([_outcome("a", "b", 4)], ["a", "b"])
    restored = rows_from_ranking_json([row.as_json() for row in rows])
    assert [(row.player_id, row.wins, row.points_for) for row in restored] == [("a", 1, 15), ("b", 0, 4)]
    assert rows_from_ranking_json(None) == []
