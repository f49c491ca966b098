"""League ranking domain modules."""

from domain.common import EndReason, MatchOutcome, PlayerRatingState

__all__ = ["EndReason", "MatchOutcome", "PlayerRatingState"]
