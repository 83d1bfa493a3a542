"""Schema bootstrap for the ledger tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Base, Match, Player, RatingHistory


def ensure_schema(engine: Engine) -> None:
    """Create the players, matches and rating_history tables if they do not exist."""
    Base.metadata.create_all(
        bind=engine,
        tables=[Player.__table__, Match.__table__, RatingHistory.__table__],
    )
