"""Persistence helpers for league blocks, rosters and cached standings."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.league.resolver import is_placeholder_name
from models import LeagueBlock, LeagueBlockMember, Player


def get_block(session: Session, block_id: str) -> LeagueBlock | None:
    return session.get(LeagueBlock, block_id)


def fetch_roster(session: Session, block_id: str) -> list[str]:
    """Roster player ids in seed order (ties by player id)."""
    statement = (
        select(LeagueBlockMember.player_id)
        .where(LeagueBlockMember.block_id == block_id)
        .order_by(LeagueBlockMember.seed, LeagueBlockMember.player_id)
    )
    return list(session.execute(statement).scalars().all())


def add_members(session: Session, block_id: str, player_ids: Iterable[str]) -> None:
    existing = set(fetch_roster(session, block_id))
    for seed, player_id in enumerate(player_ids, start=len(existing)):
        if player_id in existing:
            continue
        session.add(LeagueBlockMember(block_id=block_id, player_id=player_id, seed=seed))
        existing.add(player_id)
    session.flush()


def fetch_placeholder_ids(session: Session, player_ids: Iterable[str]) -> frozenset[str]:
    """Ids among ``player_ids`` whose handle marks them as the bye placeholder."""
    ids = sorted({player_id for player_id in player_ids if player_id})
    if not ids:
        return frozenset()
    rows = session.execute(select(Player.id, Player.handle_name).where(Player.id.in_(ids))).all()
    return frozenset(row.id for row in rows if is_placeholder_name(row.handle_name))


def store_standings(session: Session, block: LeagueBlock, ranking_json: list[dict[str, Any]]) -> None:
    block.ranking_json = ranking_json
    block.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()


def set_winner(session: Session, block: LeagueBlock, player_id: str | None) -> None:
    block.winner_player_id = player_id
    block.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()


__all__ = [
    "add_members",
    "fetch_placeholder_ids",
    "fetch_roster",
    "get_block",
    "set_winner",
    "store_standings",
]
