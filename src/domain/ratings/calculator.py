"""Team-level point transfer logic for 2v2 matches."""

from __future__ import annotations

from dataclasses import dataclass
from math import floor


@dataclass(frozen=True)
class ScoringParameters:
    initial_rating: float = 1000.0
    rating_floor: float = 0.0
    min_manual_rating: float = 100.0
    base_points: float = 50.0
    rating_gap_divisor: float = 20.0
    min_points: float = 10.0
    max_points: float = 100.0
    shutout_margin: int = 10
    shutout_multiplier: float = 1.3
    dominant_margin: int = 8
    dominant_multiplier: float = 1.1
    narrow_margin: int = 2
    narrow_multiplier: float = 0.9


DEFAULT_PARAMETERS = ScoringParameters()


@dataclass(frozen=True)
class PointTransfer:
    points_base: int
    multiplier: float
    points_effective: int
    winner_change: int
    loser_change: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (49.5 -> 50, -2.5 -> -2)."""
    return int(floor(value + 0.5))


def team_average(player1_rating: float, player2_rating: float) -> float:
    return (player1_rating + player2_rating) / 2.0


def calculate_base_points(
    winner_rating: float,
    loser_rating: float,
    params: ScoringParameters = DEFAULT_PARAMETERS,
) -> int:
    """Points at stake before the score multiplier.

    Beating a stronger team is worth more than the base, beating a weaker one
    less, bounded to [min_points, max_points].
    """
    raw = params.base_points + (loser_rating - winner_rating) / params.rating_gap_divisor
    clamped = max(params.min_points, min(raw, params.max_points))
    return round_half_up(clamped)


def get_score_multiplier(score_delta: int, params: ScoringParameters = DEFAULT_PARAMETERS) -> float:
    score_delta = abs(score_delta)
    if score_delta == params.shutout_margin:
        return params.shutout_multiplier
    if score_delta >= params.dominant_margin:
        return params.dominant_multiplier
    if score_delta <= params.narrow_margin:
        return params.narrow_multiplier
    return 1.0


def compute_transfer(
    winner_rating: float,
    loser_rating: float,
    winner_score: int,
    loser_score: int,
    params: ScoringParameters = DEFAULT_PARAMETERS,
) -> PointTransfer:
    """Compute the symmetric point transfer for one match.

    ``winner_rating``/``loser_rating`` are team averages. The loser change is
    the exact negation of the winner change, so the transfer is zero-sum.
    """
    points_base = calculate_base_points(winner_rating, loser_rating, params)
    multiplier = get_score_multiplier(winner_score - loser_score, params)
    points_effective = round_half_up(points_base * multiplier)
    return PointTransfer(
        points_base=points_base,
        multiplier=multiplier,
        points_effective=points_effective,
        winner_change=points_effective,
        loser_change=-points_effective,
    )


def apply_rating_change(
    current_rating: float,
    change: float,
    params: ScoringParameters = DEFAULT_PARAMETERS,
) -> float:
    """Apply a signed change with floor protection."""
    return max(params.rating_floor, current_rating + change)


def format_rating(rating: float) -> str:
    return str(round_half_up(rating))


def format_rating_change(change: float) -> str:
    rounded = round_half_up(change)
    return f"+{rounded}" if rounded >= 0 else str(rounded)
