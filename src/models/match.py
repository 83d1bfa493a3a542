"""matches table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import POSITION_ENUM, CreatedAtMixin


class Match(CreatedAtMixin, Base):
    """One completed 2v2 game with the audit trail of its rating transfer."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("winner_team IN (1, 2)", name="ck_matches_winner_team"),
        CheckConstraint("team1_score <> team2_score", name="ck_matches_no_tie"),
        CheckConstraint(
            "team1_score >= 0 AND team2_score >= 0",
            name="ck_matches_scores_non_negative",
        ),
        CheckConstraint(
            "team1_player1_id <> team1_player2_id "
            "AND team1_player1_id <> team2_player1_id "
            "AND team1_player1_id <> team2_player2_id "
            "AND team1_player2_id <> team2_player1_id "
            "AND team1_player2_id <> team2_player2_id "
            "AND team2_player1_id <> team2_player2_id",
            name="ck_matches_distinct_players",
        ),
        Index("idx_matches_played_at", "played_at"),
        Index("idx_matches_team1_players", "team1_player1_id", "team1_player2_id"),
        Index("idx_matches_team2_players", "team2_player1_id", "team2_player2_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    team1_player1_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team1_player2_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team2_player1_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team2_player2_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team1_player1_position: Mapped[str] = mapped_column(POSITION_ENUM, nullable=False)
    team1_player2_position: Mapped[str] = mapped_column(POSITION_ENUM, nullable=False)
    team2_player1_position: Mapped[str] = mapped_column(POSITION_ENUM, nullable=False)
    team2_player2_position: Mapped[str] = mapped_column(POSITION_ENUM, nullable=False)
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    winner_team: Mapped[int] = mapped_column(Integer, nullable=False)
    team1_rating_before: Mapped[float] = mapped_column(Float, nullable=False)
    team2_rating_before: Mapped[float] = mapped_column(Float, nullable=False)
    points_base: Mapped[int] = mapped_column(Integer, nullable=False)
    score_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    points_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
