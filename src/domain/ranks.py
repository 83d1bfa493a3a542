"""Display rank tiers derived from a rating (never stored)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Rank(str, Enum):
    IRON = "Iron"
    BRONZE = "Bronze"
    GOLD = "Gold"
    DIAMOND = "Diamond"
    MASTER = "Master"
    CHALLENGER = "Challenger"


@dataclass(frozen=True)
class RankTier:
    rank: Rank
    min_rating: float
    next_min_rating: float | None
    color: str

    @property
    def name(self) -> str:
        return self.rank.value

    def contains(self, rating: float) -> bool:
        if rating < self.min_rating:
            return False
        return self.next_min_rating is None or rating < self.next_min_rating


RANK_TIERS: tuple[RankTier, ...] = (
    RankTier(Rank.IRON, 0.0, 400.0, "#7B7B7B"),
    RankTier(Rank.BRONZE, 400.0, 800.0, "#CD7F32"),
    RankTier(Rank.GOLD, 800.0, 1200.0, "#FFD700"),
    RankTier(Rank.DIAMOND, 1200.0, 1600.0, "#B9F2FF"),
    RankTier(Rank.MASTER, 1600.0, 2000.0, "#9B59B6"),
    RankTier(Rank.CHALLENGER, 2000.0, None, "#E74C3C"),
)


def classify(rating: float) -> RankTier:
    """Return the tier whose inclusive lower bound is the highest one <= rating."""
    for tier in RANK_TIERS:
        if tier.contains(rating):
            return tier
    # Ratings are floored at 0; anything below still maps to the first tier.
    return RANK_TIERS[0]


def progress_within_tier(rating: float) -> float:
    """Linear position of ``rating`` inside its tier, as a percentage in [0, 100]."""
    tier = classify(rating)
    if tier.next_min_rating is None:
        return 100.0

    span = tier.next_min_rating - tier.min_rating
    progress = (rating - tier.min_rating) / span * 100.0
    return min(100.0, max(0.0, progress))


__all__ = ["RANK_TIERS", "Rank", "RankTier", "classify", "progress_within_tier"]
