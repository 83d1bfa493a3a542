"""players table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import POSITION_ENUM, TimestampMixin


class Player(TimestampMixin, Base):
    """One roster member and their current rating."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("current_rating >= 0.0", name="ck_players_rating_floor"),
        CheckConstraint("points_won >= 0 AND points_lost >= 0", name="ck_players_points"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    preferred_position: Mapped[str] = mapped_column(
        POSITION_ENUM,
        nullable=False,
        server_default=text("'attack'"),
    )
    current_rating: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        server_default=text("1000.0"),
    )
    points_won: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    points_lost: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
