"""Unit tests for the point transfer calculator."""

from __future__ import annotations

import pytest

from domain.ratings.calculator import (
    ScoringParameters,
    apply_rating_change,
    calculate_base_points,
    compute_transfer,
    format_rating,
    format_rating_change,
    get_score_multiplier,
    round_half_up,
    team_average,
)


def test_scoring_parameters_defaults_are_expected_constants() -> None:
    params = ScoringParameters()
    assert params.initial_rating == pytest.approx(1000.0)
    assert params.rating_floor == pytest.approx(0.0)
    assert params.base_points == pytest.approx(50.0)
    assert params.rating_gap_divisor == pytest.approx(20.0)
    assert params.min_points == pytest.approx(10.0)
    assert params.max_points == pytest.approx(100.0)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [(10, 1.3), (9, 1.1), (8, 1.1), (7, 1.0), (5, 1.0), (3, 1.0), (2, 0.9), (1, 0.9)],
)
def test_score_multiplier_table(delta: int, expected: float) -> None:
    assert get_score_multiplier(delta) == pytest.approx(expected)


def test_score_multiplier_uses_absolute_delta() -> None:
    assert get_score_multiplier(-10) == pytest.approx(1.3)
    assert get_score_multiplier(-2) == pytest.approx(0.9)


def test_base_points_for_equal_teams() -> None:
    assert calculate_base_points(1000.0, 1000.0) == 50


def test_base_points_are_clamped_for_extreme_gaps() -> None:
    assert calculate_base_points(2000.0, 0.0) == 10
    assert calculate_base_points(0.0, 2000.0) == 100


def test_base_points_reward_upsets() -> None:
    assert calculate_base_points(900.0, 1100.0) == 60
    assert calculate_base_points(1100.0, 900.0) == 40


def test_half_points_round_up() -> None:
    assert round_half_up(49.5) == 50
    assert round_half_up(44.5) == 45
    assert round_half_up(-2.5) == -2
    # 50 + 10 / 20 = 50.5
    assert calculate_base_points(1000.0, 1010.0) == 51


def test_dominant_win_between_equal_teams() -> None:
    transfer = compute_transfer(500.0, 500.0, 10, 2)
    assert transfer.points_base == 50
    assert transfer.multiplier == pytest.approx(1.1)
    assert transfer.points_effective == 55
    assert transfer.winner_change == 55
    assert transfer.loser_change == -55


def test_narrow_win_between_equal_teams() -> None:
    transfer = compute_transfer(1000.0, 1000.0, 6, 4)
    assert transfer.multiplier == pytest.approx(0.9)
    assert transfer.points_effective == 45


def test_favourite_shutout_win() -> None:
    transfer = compute_transfer(1200.0, 1000.0, 10, 0)
    assert transfer.points_base == 40
    assert transfer.multiplier == pytest.approx(1.3)
    assert transfer.points_effective == 52


@pytest.mark.parametrize(
    ("winner_rating", "loser_rating", "winner_score", "loser_score"),
    [
        (1000.0, 1000.0, 10, 9),
        (2400.0, 0.0, 10, 5),
        (0.0, 2400.0, 10, 0),
        (1337.0, 1012.5, 7, 3),
    ],
)
def test_transfer_is_zero_sum_and_bounded(
    winner_rating: float,
    loser_rating: float,
    winner_score: int,
    loser_score: int,
) -> None:
    transfer = compute_transfer(winner_rating, loser_rating, winner_score, loser_score)
    assert transfer.winner_change + transfer.loser_change == 0
    assert transfer.winner_change > 0
    assert 9 <= transfer.points_effective <= 130


def test_team_average() -> None:
    assert team_average(1200.0, 800.0) == pytest.approx(1000.0)


def test_rating_change_is_floored() -> None:
    assert apply_rating_change(20.0, -55) == pytest.approx(0.0)
    assert apply_rating_change(1000.0, -55) == pytest.approx(945.0)
    assert apply_rating_change(1000.0, 52) == pytest.approx(1052.0)


def test_rating_formatters() -> None:
    assert format_rating(1049.6) == "1050"
    assert format_rating(0.0) == "0"
    assert format_rating_change(52) == "+52"
    assert format_rating_change(0) == "+0"
    assert format_rating_change(-45) == "-45"
