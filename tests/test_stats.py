"""Integration tests for leaderboard and per-player statistics."""

from __future__ import annotations

import pytest

from domain.common import MatchSubmission
from errors import NotFoundError
from services import Ledger, StatsAggregator


def _play(
    ledger: Ledger,
    roster: dict[str, int],
    team1: tuple[str, str],
    team2: tuple[str, str],
    team1_score: int,
    team2_score: int,
) -> int:
    committed = ledger.commit_match(
        MatchSubmission(
            team1_player1_id=roster[team1[0]],
            team1_player2_id=roster[team1[1]],
            team2_player1_id=roster[team2[0]],
            team2_player2_id=roster[team2[1]],
            team1_score=team1_score,
            team2_score=team2_score,
        )
    )
    return committed.match.id


@pytest.fixture
def season(ledger: Ledger, roster: dict[str, int]) -> list[int]:
    """Three matches centred on Alice.

    Resulting ratings: Emile 1053, Fanny 1053, Alice 1042, Chloe 995,
    Bruno 952, Dylan 905.
    """
    return [
        _play(ledger, roster, ("Alice", "Bruno"), ("Chloe", "Dylan"), 10, 5),
        _play(ledger, roster, ("Alice", "Chloe"), ("Bruno", "Dylan"), 10, 8),
        _play(ledger, roster, ("Alice", "Bruno"), ("Emile", "Fanny"), 3, 10),
    ]


def test_leaderboard_without_matches(stats: StatsAggregator, roster: dict[str, int]) -> None:
    entries = stats.leaderboard()
    assert [entry.rank for entry in entries] == [1, 2, 3, 4, 5, 6]
    # Equal ratings fall back to id order.
    assert [entry.player_id for entry in entries] == sorted(roster.values())
    for entry in entries:
        assert entry.games_played == 0
        assert entry.win_rate == pytest.approx(0.0)


def test_leaderboard_orders_by_rating(stats: StatsAggregator, season: list[int]) -> None:
    entries = stats.leaderboard()

    assert [entry.player_name for entry in entries] == [
        "Emile",
        "Fanny",
        "Alice",
        "Chloe",
        "Bruno",
        "Dylan",
    ]
    assert [entry.rank for entry in entries] == [1, 2, 3, 4, 5, 6]
    assert [round(entry.current_rating) for entry in entries] == [1053, 1053, 1042, 995, 952, 905]

    alice = entries[2]
    assert alice.games_played == 3
    assert alice.wins == 2
    assert alice.losses == 1
    assert alice.win_rate == pytest.approx(200.0 / 3.0)

    fanny = entries[1]
    assert fanny.games_played == 1
    assert fanny.win_rate == pytest.approx(100.0)


def test_player_summary(stats: StatsAggregator, roster: dict[str, int], season: list[int]) -> None:
    summary = stats.player_summary(roster["Alice"])

    assert summary.player_name == "Alice"
    assert summary.current_rating == pytest.approx(1042.0)
    assert summary.games_played == 3
    assert summary.wins == 2
    assert summary.losses == 1
    assert summary.avg_rating_change == pytest.approx((50 + 45 - 53) / 3)
    assert summary.attack.games_played == 3
    assert summary.attack.wins == 2
    assert summary.defense.games_played == 0
    assert summary.defense.win_rate == pytest.approx(0.0)


def test_player_summary_for_new_player(stats: StatsAggregator, roster: dict[str, int]) -> None:
    summary = stats.player_summary(roster["Fanny"])
    assert summary.games_played == 0
    assert summary.win_rate == pytest.approx(0.0)
    assert summary.avg_rating_change == pytest.approx(0.0)


def test_best_partners(stats: StatsAggregator, roster: dict[str, int], season: list[int]) -> None:
    partners = stats.best_partners(roster["Alice"])

    assert [partner.partner_name for partner in partners] == ["Chloe", "Bruno"]
    assert partners[0].games_played == 1
    assert partners[0].win_rate == pytest.approx(100.0)
    assert partners[1].games_played == 2
    assert partners[1].wins == 1
    assert partners[1].win_rate == pytest.approx(50.0)


def test_toughest_opponents(stats: StatsAggregator, roster: dict[str, int], season: list[int]) -> None:
    opponents = stats.toughest_opponents(roster["Alice"])

    assert [opponent.opponent_name for opponent in opponents] == [
        "Emile",
        "Fanny",
        "Dylan",
        "Bruno",
        "Chloe",
    ]
    emile = opponents[0]
    assert emile.games_played == 1
    assert emile.losses == 1
    assert emile.opponent_win_rate == pytest.approx(100.0)
    assert opponents[2].games_played == 2
    assert opponents[2].opponent_win_rate == pytest.approx(0.0)
    assert roster["Alice"] not in {opponent.opponent_id for opponent in opponents}


def test_head_to_head_limit(stats: StatsAggregator, roster: dict[str, int], season: list[int]) -> None:
    assert len(stats.toughest_opponents(roster["Alice"], limit=2)) == 2
    assert len(stats.best_partners(roster["Alice"], limit=1)) == 1


def test_recent_performance(stats: StatsAggregator, roster: dict[str, int], season: list[int]) -> None:
    recent = stats.recent_performance(roster["Alice"], limit=2)

    assert [performance.match_id for performance in recent] == [season[2], season[1]]
    assert recent[0].won is False
    assert recent[0].rating_change == pytest.approx(-53.0)
    assert recent[0].rating_after == pytest.approx(1042.0)
    assert recent[1].won is True
    assert recent[1].rating_change == pytest.approx(45.0)


def test_rating_history(stats: StatsAggregator, roster: dict[str, int], season: list[int]) -> None:
    points = stats.rating_history(roster["Alice"])
    assert [point.rating for point in points] == pytest.approx([1050.0, 1095.0, 1042.0])
    assert points == sorted(points, key=lambda point: point.timestamp)


def test_rating_history_falls_back_to_initial_rating(
    stats: StatsAggregator,
    roster: dict[str, int],
) -> None:
    points = stats.rating_history(roster["Alice"])
    assert len(points) == 1
    assert points[0].rating == pytest.approx(1000.0)


def test_recent_matches_include_names(
    stats: StatsAggregator,
    roster: dict[str, int],
    season: list[int],
) -> None:
    matches = stats.recent_matches(limit=2)
    assert [item.match.id for item in matches] == [season[2], season[1]]
    assert matches[0].team1_player1_name == "Alice"
    assert matches[0].team2_player2_name == "Fanny"
    assert matches[0].match.team_of(roster["Fanny"]) == 2
    assert matches[0].match.won_by(roster["Fanny"])
    assert not matches[0].match.won_by(roster["Alice"])
    assert matches[0].match.team_of(roster["Dylan"]) is None


def test_list_players_is_sorted_by_name(stats: StatsAggregator, ledger: Ledger) -> None:
    for name in ("Zoe", "Marc", "Anna"):
        ledger.add_player(name)
    assert [player.name for player in stats.list_players()] == ["Anna", "Marc", "Zoe"]


def test_unknown_ids_raise_not_found(stats: StatsAggregator) -> None:
    with pytest.raises(NotFoundError):
        stats.player_summary(42)
    with pytest.raises(NotFoundError):
        stats.best_partners(42)
    with pytest.raises(NotFoundError):
        stats.rating_history(42)
    with pytest.raises(NotFoundError, match="match 42 not found"):
        stats.get_match(42)
