"""ORM models."""

from models.base import Base
from models.league_block import LeagueBlock, LeagueBlockMember
from models.match import Match
from models.player import Player
from models.ranking_config import RankingConfigRow
from models.tournament import Tournament

__all__ = [
    "Base",
    "LeagueBlock",
    "LeagueBlockMember",
    "Match",
    "Player",
    "RankingConfigRow",
    "Tournament",
]
