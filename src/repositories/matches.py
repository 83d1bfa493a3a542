"""Persistence helpers for the matches table."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Integer, case, delete, literal, or_, select, union_all
from sqlalchemy.orm import Session

from domain.common import MatchRecord, MatchSubmission, Position
from domain.ratings.calculator import PointTransfer
from models import Match

# (player column, position column, team) for the four slots of a match.
_SLOTS = (
    (Match.team1_player1_id, Match.team1_player1_position, 1),
    (Match.team1_player2_id, Match.team1_player2_position, 1),
    (Match.team2_player1_id, Match.team2_player1_position, 2),
    (Match.team2_player2_id, Match.team2_player2_position, 2),
)


def match_to_record(match: Match) -> MatchRecord:
    return MatchRecord(
        id=match.id,
        team1_player1_id=match.team1_player1_id,
        team1_player2_id=match.team1_player2_id,
        team2_player1_id=match.team2_player1_id,
        team2_player2_id=match.team2_player2_id,
        team1_player1_position=Position(match.team1_player1_position),
        team1_player2_position=Position(match.team1_player2_position),
        team2_player1_position=Position(match.team2_player1_position),
        team2_player2_position=Position(match.team2_player2_position),
        team1_score=match.team1_score,
        team2_score=match.team2_score,
        winner_team=match.winner_team,
        team1_rating_before=float(match.team1_rating_before),
        team2_rating_before=float(match.team2_rating_before),
        points_base=match.points_base,
        score_multiplier=float(match.score_multiplier),
        points_delta=match.points_delta,
        played_at=match.played_at,
        created_at=match.created_at,
    )


def insert_match(
    session: Session,
    submission: MatchSubmission,
    *,
    team1_rating_before: float,
    team2_rating_before: float,
    transfer: PointTransfer,
    played_at: datetime,
    created_at: datetime,
) -> Match:
    match = Match(
        team1_player1_id=submission.team1_player1_id,
        team1_player2_id=submission.team1_player2_id,
        team2_player1_id=submission.team2_player1_id,
        team2_player2_id=submission.team2_player2_id,
        team1_player1_position=submission.team1_player1_position.value,
        team1_player2_position=submission.team1_player2_position.value,
        team2_player1_position=submission.team2_player1_position.value,
        team2_player2_position=submission.team2_player2_position.value,
        team1_score=submission.team1_score,
        team2_score=submission.team2_score,
        winner_team=submission.winner_team,
        team1_rating_before=team1_rating_before,
        team2_rating_before=team2_rating_before,
        points_base=transfer.points_base,
        score_multiplier=transfer.multiplier,
        points_delta=transfer.points_effective,
        played_at=played_at,
        created_at=created_at,
    )
    session.add(match)
    session.flush()
    return match


def get_match(session: Session, match_id: int) -> Match | None:
    return session.get(Match, match_id)


def fetch_match_ids_for_player(session: Session, player_id: int) -> list[int]:
    statement = select(Match.id).where(
        or_(*(player_column == player_id for player_column, _, _ in _SLOTS))
    )
    return list(session.execute(statement).scalars())


def delete_matches(session: Session, match_ids: Sequence[int]) -> None:
    if not match_ids:
        return
    session.execute(delete(Match).where(Match.id.in_(match_ids)))


def fetch_recent_matches(session: Session, limit: int) -> list[Match]:
    """Most recently played matches first."""
    statement = select(Match).order_by(Match.played_at.desc(), Match.id.desc()).limit(limit)
    return list(session.execute(statement).scalars())


def participation_subquery(name: str = "participation"):
    """One row per (match, player): team, position, won flag, played_at.

    Unrolls the four player slots of every match so aggregates can group by
    player without caring which slot they occupied.
    """
    selects = [
        select(
            Match.id.label("match_id"),
            player_column.label("player_id"),
            literal(team, Integer).label("team"),
            position_column.label("position"),
            case((Match.winner_team == team, 1), else_=0).label("won"),
            Match.played_at.label("played_at"),
        )
        for player_column, position_column, team in _SLOTS
    ]
    return union_all(*selects).subquery(name)
