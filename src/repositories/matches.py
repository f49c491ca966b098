"""Persistence helpers for matches and the mapping from rows to domain outcomes."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import MatchOutcome
from models import Match


def get_match(session: Session, match_id: str) -> Match | None:
    return session.get(Match, match_id)


def create_match(
    session: Session,
    *,
    player_a_id: str,
    player_b_id: str,
    league_block_id: str | None = None,
    tournament_id: str | None = None,
    played_at: datetime | None = None,
) -> Match:
    """Insert a scheduled match between two players."""
    if player_a_id == player_b_id:
        raise ValueError(f"player_a_id and player_b_id must differ (got {player_a_id})")
    match = Match(
        id=uuid.uuid4().hex,
        player_a_id=player_a_id,
        player_b_id=player_b_id,
        league_block_id=league_block_id,
        tournament_id=tournament_id,
        played_at=played_at,
        status="scheduled",
    )
    session.add(match)
    session.flush()
    return match


def to_outcome(match: Match) -> MatchOutcome | None:
    """Map a match row to a ``MatchOutcome``; unscored rows map to ``None``."""
    if (
        match.winner_id is None
        or match.loser_id is None
        or match.winner_score is None
        or match.loser_score is None
    ):
        return None
    return MatchOutcome(
        winner_id=match.winner_id,
        loser_id=match.loser_id,
        winner_score=int(match.winner_score),
        loser_score=int(match.loser_score),
        recorded_at=match.played_at or match.updated_at or match.created_at,
        match_id=match.id,
    )


def fetch_block_matches(session: Session, block_id: str) -> list[Match]:
    statement = (
        select(Match)
        .where(Match.league_block_id == block_id)
        .order_by(Match.created_at, Match.id)
    )
    return list(session.execute(statement).scalars().all())


def fetch_block_outcomes(session: Session, block_id: str) -> list[MatchOutcome]:
    """Completed results of one league block in creation order."""
    outcomes: list[MatchOutcome] = []
    for match in fetch_block_matches(session, block_id):
        outcome = to_outcome(match)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


__all__ = [
    "create_match",
    "fetch_block_matches",
    "fetch_block_outcomes",
    "get_match",
    "to_outcome",
]
