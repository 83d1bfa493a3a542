"""Shared types for 2v2 match records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from errors import ValidationError

MIN_NAME_LENGTH = 2


class Position(str, Enum):
    """Where a player stands on the table for one match."""

    ATTACK = "attack"
    DEFENSE = "defense"

    @classmethod
    def parse(cls, value: str | Position) -> Position:
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"invalid position {value!r}; expected one of {[member.value for member in cls]}"
            ) from None


def normalize_player_name(name: str) -> str:
    """Trim a display name and check it is long enough."""
    normalized = (name or "").strip()
    if not normalized:
        raise ValidationError("player name cannot be empty")
    if len(normalized) < MIN_NAME_LENGTH:
        raise ValidationError(
            f"player name must be at least {MIN_NAME_LENGTH} characters, got {normalized!r}"
        )
    return normalized


def _validate_lineup(player_ids: tuple[int, int, int, int], team1_score: int, team2_score: int) -> None:
    if len(set(player_ids)) != 4:
        raise ValidationError(f"all participants must be unique, got {list(player_ids)}")
    for score in (team1_score, team2_score):
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValidationError(f"scores must be integers, got {score!r}")
        if score < 0:
            raise ValidationError(f"scores must be >= 0, got {score}")
    if team1_score == team2_score:
        raise ValidationError(f"a match cannot end in a tie ({team1_score}-{team2_score})")


@dataclass(frozen=True)
class PlayerRecord:
    id: int
    name: str
    preferred_position: Position
    current_rating: float
    points_won: int
    points_lost: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if len(self.name.strip()) < MIN_NAME_LENGTH:
            raise ValidationError(f"player_id={self.id} has invalid name {self.name!r}")
        if self.current_rating < 0.0:
            raise ValidationError(f"player_id={self.id} has negative rating {self.current_rating}")
        object.__setattr__(self, "preferred_position", Position.parse(self.preferred_position))


@dataclass(frozen=True)
class MatchSubmission:
    """Canonical 2v2 result payload accepted by the ledger."""

    team1_player1_id: int
    team1_player2_id: int
    team2_player1_id: int
    team2_player2_id: int
    team1_score: int
    team2_score: int
    team1_player1_position: Position = Position.ATTACK
    team1_player2_position: Position = Position.DEFENSE
    team2_player1_position: Position = Position.ATTACK
    team2_player2_position: Position = Position.DEFENSE
    played_at: datetime | None = None

    def __post_init__(self) -> None:
        _validate_lineup(self.player_ids, self.team1_score, self.team2_score)
        for field_name in (
            "team1_player1_position",
            "team1_player2_position",
            "team2_player1_position",
            "team2_player2_position",
        ):
            object.__setattr__(self, field_name, Position.parse(getattr(self, field_name)))

    @property
    def player_ids(self) -> tuple[int, int, int, int]:
        return (
            self.team1_player1_id,
            self.team1_player2_id,
            self.team2_player1_id,
            self.team2_player2_id,
        )

    @property
    def positions(self) -> tuple[Position, Position, Position, Position]:
        return (
            self.team1_player1_position,
            self.team1_player2_position,
            self.team2_player1_position,
            self.team2_player2_position,
        )

    @property
    def winner_team(self) -> int:
        return 1 if self.team1_score > self.team2_score else 2


@dataclass(frozen=True)
class MatchRecord:
    """A persisted match, including the audit fields of its rating transfer."""

    id: int
    team1_player1_id: int
    team1_player2_id: int
    team2_player1_id: int
    team2_player2_id: int
    team1_player1_position: Position
    team1_player2_position: Position
    team2_player1_position: Position
    team2_player2_position: Position
    team1_score: int
    team2_score: int
    winner_team: int
    team1_rating_before: float
    team2_rating_before: float
    points_base: int
    score_multiplier: float
    points_delta: int
    played_at: datetime
    created_at: datetime

    def __post_init__(self) -> None:
        _validate_lineup(self.player_ids, self.team1_score, self.team2_score)
        expected_winner = 1 if self.team1_score > self.team2_score else 2
        if self.winner_team != expected_winner:
            raise ValidationError(
                f"match_id={self.id} winner_team={self.winner_team} does not match score "
                f"{self.team1_score}-{self.team2_score}"
            )

    @property
    def player_ids(self) -> tuple[int, int, int, int]:
        return (
            self.team1_player1_id,
            self.team1_player2_id,
            self.team2_player1_id,
            self.team2_player2_id,
        )

    def team_of(self, player_id: int) -> int | None:
        if player_id in (self.team1_player1_id, self.team1_player2_id):
            return 1
        if player_id in (self.team2_player1_id, self.team2_player2_id):
            return 2
        return None

    def won_by(self, player_id: int) -> bool:
        return self.team_of(player_id) == self.winner_team


@dataclass(frozen=True)
class RatingHistoryRecord:
    id: int
    player_id: int
    match_id: int
    rating_before: float
    rating_after: float
    change: float
    created_at: datetime


@dataclass(frozen=True)
class RatingChange:
    """Per-player outcome of one committed match."""

    player_id: int
    rating_before: float
    rating_after: float
    change: int
