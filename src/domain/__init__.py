"""Rating domain modules."""

from domain.common import (
    MatchRecord,
    MatchSubmission,
    PlayerRecord,
    Position,
    RatingChange,
    RatingHistoryRecord,
)

__all__ = [
    "MatchRecord",
    "MatchSubmission",
    "PlayerRecord",
    "Position",
    "RatingChange",
    "RatingHistoryRecord",
]
