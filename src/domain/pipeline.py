"""Match reporting and league-block refresh on top of the pure ranking calculators."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.orm import Session, sessionmaker

from domain.common import EndReason
from domain.league.resolver import BlockStandings, StandingsResolver, is_finished_status
from domain.league.standings import StandingsRow, rank_standings, rows_from_ranking_json
from domain.ratings.calculator import RatingAdjustment, RatingAdjustmentCalculator
from domain.ratings.config import RankingConfig
from models import Match, Tournament
from repositories import league_blocks, matches, players
from repositories.ranking_config import load_ranking_config_row, row_to_config

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchReport:
    """Outcome of one reported (or re-reported) match."""

    match_id: str
    winner_id: str
    loser_id: str
    winner_score: int
    loser_score: int
    end_reason: EndReason
    affects_rating: bool
    adjustment: RatingAdjustment
    reverted_previous: bool
    block_standings: BlockStandings | None = None


def active_ranking_config(session: Session, default_config: RankingConfig | None = None) -> RankingConfig:
    """Stored ``ranking_config`` row when present, otherwise the supplied defaults."""
    row = load_ranking_config_row(session)
    if row is None:
        return default_config or RankingConfig()
    config, _ = row_to_config(row)
    return config


def report_match_result(
    session_factory: sessionmaker[Session],
    *,
    match_id: str,
    winner_id: str,
    winner_score: int,
    loser_score: int,
    end_reason: str | EndReason = EndReason.NORMAL,
    apply_rating: bool | None = None,
    default_config: RankingConfig | None = None,
) -> MatchReport:
    """Score an existing match and update both players.

    A match that was already reported is first rolled back using the deltas
    stored on it, so corrected re-submissions never double count.
    """
    with session_factory() as session:
        try:
            report = _report(
                session,
                match_id=match_id,
                winner_id=winner_id,
                winner_score=winner_score,
                loser_score=loser_score,
                end_reason=EndReason.parse(end_reason),
                apply_rating=apply_rating,
                default_config=default_config,
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
    return report


def record_match_result(
    session_factory: sessionmaker[Session],
    *,
    winner_id: str,
    loser_id: str,
    winner_score: int,
    loser_score: int,
    league_block_id: str | None = None,
    tournament_id: str | None = None,
    played_at: datetime | None = None,
    end_reason: str | EndReason = EndReason.NORMAL,
    apply_rating: bool | None = None,
    default_config: RankingConfig | None = None,
) -> MatchReport:
    """Create a match row and report it in one transaction."""
    with session_factory() as session:
        try:
            match = matches.create_match(
                session,
                player_a_id=winner_id,
                player_b_id=loser_id,
                league_block_id=league_block_id,
                tournament_id=tournament_id,
                played_at=played_at,
            )
            report = _report(
                session,
                match_id=match.id,
                winner_id=winner_id,
                winner_score=winner_score,
                loser_score=loser_score,
                end_reason=EndReason.parse(end_reason),
                apply_rating=apply_rating,
                default_config=default_config,
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
    return report


def refresh_block_standings(session_factory: sessionmaker[Session], block_id: str) -> BlockStandings:
    """Recompute a block's standings from its match rows and store the ranking cache."""
    with session_factory() as session:
        try:
            standings = _refresh_block(session, block_id)
            session.commit()
        except Exception:
            session.rollback()
            raise
    return standings


def cached_block_standings(session_factory: sessionmaker[Session], block_id: str) -> list[StandingsRow]:
    """Ranked rows from a block's stored ranking cache, without recomputing from matches."""
    with session_factory() as session:
        block = league_blocks.get_block(session, block_id)
        if block is None:
            raise LookupError(f"league block not found: {block_id}")
        return rank_standings(rows_from_ranking_json(block.ranking_json))


def set_block_winner(
    session_factory: sessionmaker[Session],
    block_id: str,
    player_id: str | None,
) -> BlockStandings:
    """Set (or clear with ``None``) the administrator winner override of a block."""
    with session_factory() as session:
        try:
            block = league_blocks.get_block(session, block_id)
            if block is None:
                raise LookupError(f"league block not found: {block_id}")
            if player_id is not None and not players.get_players(session, [player_id]):
                raise LookupError(f"player not found: {player_id}")
            league_blocks.set_winner(session, block, player_id)
            standings = _refresh_block(session, block_id)
            session.commit()
        except Exception:
            session.rollback()
            raise
    LOGGER.info("block_id=%s winner override set to %s", block_id, player_id)
    return standings


def _validate_scores(winner_score: int, loser_score: int) -> None:
    for label, score in (("winner_score", winner_score), ("loser_score", loser_score)):
        if not isinstance(score, int) or isinstance(score, bool) or score < 0:
            raise ValueError(f"{label} must be a non-negative integer, got {score!r}")
    if winner_score <= loser_score:
        raise ValueError(
            f"winner_score must be greater than loser_score (got {winner_score}-{loser_score})"
        )


def _report(
    session: Session,
    *,
    match_id: str,
    winner_id: str,
    winner_score: int,
    loser_score: int,
    end_reason: EndReason,
    apply_rating: bool | None,
    default_config: RankingConfig | None,
) -> MatchReport:
    _validate_scores(winner_score, loser_score)

    match = matches.get_match(session, match_id)
    if match is None:
        raise LookupError(f"match not found: {match_id}")
    if winner_id not in (match.player_a_id, match.player_b_id):
        raise ValueError(
            f"winner_id={winner_id} is not a participant of match_id={match_id} "
            f"({match.player_a_id}/{match.player_b_id})"
        )
    loser_id = match.player_b_id if winner_id == match.player_a_id else match.player_a_id
    affects_rating = end_reason.affects_rating if apply_rating is None else apply_rating

    loaded = players.get_players(
        session,
        [winner_id, loser_id, match.winner_id, match.loser_id],
        for_update=True,
    )
    reverted_previous = _revert_previous_report(match, loaded)

    winner = loaded.get(winner_id)
    loser = loaded.get(loser_id)
    missing = [player_id for player_id, player in ((winner_id, winner), (loser_id, loser)) if player is None]
    if winner is None or loser is None:
        raise LookupError(f"players not found: {', '.join(missing)}")

    winner_state = players.rating_state(winner)
    loser_state = players.rating_state(loser)
    if affects_rating:
        calculator = RatingAdjustmentCalculator(active_ranking_config(session, default_config))
        adjustment = calculator.process_match(
            winner_state,
            loser_state,
            winner_score,
            loser_score,
            bonus_coefficient=_bonus_coefficient(session, match),
        )
    else:
        adjustment = RatingAdjustment.unchanged(winner_state, loser_state)

    players.apply_result(winner, loser, adjustment)
    _store_report(
        match,
        winner_id=winner_id,
        loser_id=loser_id,
        winner_score=winner_score,
        loser_score=loser_score,
        end_reason=end_reason,
        affects_rating=affects_rating,
        adjustment=adjustment,
    )
    session.flush()

    block_standings = None
    if match.league_block_id is not None:
        block_standings = _refresh_block(session, match.league_block_id)

    LOGGER.info(
        "match_id=%s winner=%s loser=%s score=%d-%d end_reason=%s affects_rating=%s "
        "winner_delta=%.2f loser_delta=%.2f reverted_previous=%s",
        match_id,
        winner_id,
        loser_id,
        winner_score,
        loser_score,
        end_reason.value,
        affects_rating,
        adjustment.winner_rating_delta,
        adjustment.loser_rating_delta,
        reverted_previous,
    )
    return MatchReport(
        match_id=match_id,
        winner_id=winner_id,
        loser_id=loser_id,
        winner_score=winner_score,
        loser_score=loser_score,
        end_reason=end_reason,
        affects_rating=affects_rating,
        adjustment=adjustment,
        reverted_previous=reverted_previous,
        block_standings=block_standings,
    )


def _revert_previous_report(match: Match, loaded: dict) -> bool:
    if match.winner_id is None or match.loser_id is None:
        return False
    players.revert_result(
        loaded.get(match.winner_id),
        loaded.get(match.loser_id),
        winner_rating_delta=match.winner_rating_delta if match.affects_rating else 0.0,
        loser_rating_delta=match.loser_rating_delta if match.affects_rating else 0.0,
        winner_handicap_delta=match.winner_handicap_delta if match.affects_rating else 0,
        loser_handicap_delta=match.loser_handicap_delta if match.affects_rating else 0,
    )
    LOGGER.debug("match_id=%s previous report rolled back", match.id)
    return True


def _bonus_coefficient(session: Session, match: Match) -> float:
    if match.tournament_id is None:
        return 1.0
    tournament = session.get(Tournament, match.tournament_id)
    if tournament is None:
        return 1.0
    return float(tournament.bonus_coefficient)


def _store_report(
    match: Match,
    *,
    winner_id: str,
    loser_id: str,
    winner_score: int,
    loser_score: int,
    end_reason: EndReason,
    affects_rating: bool,
    adjustment: RatingAdjustment,
) -> None:
    now = datetime.now(UTC).replace(tzinfo=None)
    match.winner_id = winner_id
    match.loser_id = loser_id
    match.winner_score = winner_score
    match.loser_score = loser_score
    match.end_reason = end_reason.value
    match.affects_rating = affects_rating
    match.winner_rating_delta = adjustment.winner_rating_delta
    match.loser_rating_delta = adjustment.loser_rating_delta
    match.winner_handicap_delta = adjustment.winner_handicap_delta
    match.loser_handicap_delta = adjustment.loser_handicap_delta
    match.status = "finalized"
    match.updated_at = now
    if match.played_at is None:
        match.played_at = now


def _refresh_block(session: Session, block_id: str) -> BlockStandings:
    block = league_blocks.get_block(session, block_id)
    if block is None:
        raise LookupError(f"league block not found: {block_id}")

    roster = league_blocks.fetch_roster(session, block_id)
    outcomes = matches.fetch_block_outcomes(session, block_id)
    seen_ids = set(roster)
    for outcome in outcomes:
        seen_ids.update((outcome.winner_id, outcome.loser_id))

    standings = StandingsResolver().resolve(
        outcomes,
        roster,
        explicit_winner=block.winner_player_id,
        finished=is_finished_status(block.status),
        placeholders=league_blocks.fetch_placeholder_ids(session, seen_ids),
    )
    league_blocks.store_standings(session, block, standings.as_ranking_json())
    LOGGER.info(
        "block_id=%s completed=%d/%d winner=%s source=%s",
        block_id,
        standings.completed_matches,
        standings.expected_matches,
        standings.winner.player_id,
        standings.winner.source.value,
    )
    return standings


__all__ = [
    "MatchReport",
    "active_ranking_config",
    "cached_block_standings",
    "record_match_result",
    "refresh_block_standings",
    "report_match_result",
    "set_block_winner",
]
