"""Persistence helpers for player ratings, handicaps and win/loss counters."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from domain.common import PlayerRatingState
from domain.ratings.calculator import RatingAdjustment
from models import Player


def players_statement(player_ids: Iterable[str], *, for_update: bool = False) -> Select[tuple[Player]]:
    """Select players by id in id order; ``for_update`` adds a row lock on PostgreSQL."""
    ids = sorted({player_id for player_id in player_ids if player_id})
    statement = select(Player).where(Player.id.in_(ids)).order_by(Player.id)
    if for_update:
        statement = statement.with_for_update().execution_options(populate_existing=True)
    return statement


def get_players(
    session: Session,
    player_ids: Iterable[str],
    *,
    for_update: bool = False,
) -> dict[str, Player]:
    """Load players by id; missing ids are simply absent from the result.

    Reporting loads with ``for_update=True``; the rows stay locked until the
    transaction ends.
    """
    ids = [player_id for player_id in player_ids if player_id]
    if not ids:
        return {}
    rows = session.execute(players_statement(ids, for_update=for_update)).scalars().all()
    return {player.id: player for player in rows}


def rating_state(player: Player) -> PlayerRatingState:
    return PlayerRatingState(rating=float(player.rating), handicap=int(player.handicap))


def apply_result(winner: Player, loser: Player, adjustment: RatingAdjustment) -> None:
    """Store post-match ratings/handicaps and bump win/loss counters."""
    winner.rating = adjustment.winner_rating
    winner.handicap = adjustment.winner_handicap
    winner.matches_played = (winner.matches_played or 0) + 1
    winner.wins = (winner.wins or 0) + 1

    loser.rating = adjustment.loser_rating
    loser.handicap = adjustment.loser_handicap
    loser.matches_played = (loser.matches_played or 0) + 1
    loser.losses = (loser.losses or 0) + 1


def revert_result(
    winner: Player | None,
    loser: Player | None,
    *,
    winner_rating_delta: float,
    loser_rating_delta: float,
    winner_handicap_delta: int,
    loser_handicap_delta: int,
) -> None:
    """Undo a previously stored result; counters never drop below zero."""
    if winner is not None:
        winner.rating = winner.rating - winner_rating_delta
        winner.handicap = winner.handicap - winner_handicap_delta
        winner.matches_played = max(0, (winner.matches_played or 0) - 1)
        winner.wins = max(0, (winner.wins or 0) - 1)
    if loser is not None:
        loser.rating = loser.rating - loser_rating_delta
        loser.handicap = loser.handicap - loser_handicap_delta
        loser.matches_played = max(0, (loser.matches_played or 0) - 1)
        loser.losses = max(0, (loser.losses or 0) - 1)


def fetch_leaderboard(session: Session, *, limit: int = 20, active_only: bool = True) -> Sequence[Player]:
    """Players ordered by rating, best first."""
    statement = select(Player).order_by(Player.rating.desc(), Player.handle_name, Player.id).limit(limit)
    if active_only:
        statement = statement.where(Player.is_active.is_(True))
    return session.execute(statement).scalars().all()


__all__ = [
    "apply_result",
    "fetch_leaderboard",
    "get_players",
    "players_statement",
    "rating_state",
    "revert_result",
]
