"""Point-transfer scoring for 2v2 matches."""

from domain.ratings.calculator import (
    PointTransfer,
    ScoringParameters,
    apply_rating_change,
    calculate_base_points,
    compute_transfer,
    get_score_multiplier,
)

__all__ = [
    "PointTransfer",
    "ScoringParameters",
    "apply_rating_change",
    "calculate_base_points",
    "compute_transfer",
    "get_score_multiplier",
]
