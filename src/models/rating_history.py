"""rating_history table model."""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin


class RatingHistory(CreatedAtMixin, Base):
    """Append-only rating events (one row per player per match)."""

    __tablename__ = "rating_history"
    __table_args__ = (
        UniqueConstraint("player_id", "match_id", name="uq_rating_history_player_match"),
        Index("idx_rating_history_player_created", "player_id", "created_at"),
        Index("idx_rating_history_match", "match_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), nullable=False)
    rating_before: Mapped[float] = mapped_column(Float, nullable=False)
    rating_after: Mapped[float] = mapped_column(Float, nullable=False)
    rating_change: Mapped[float] = mapped_column(Float, nullable=False)
