"""Persistence helpers for the append-only rating_history table."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, insert, or_, select
from sqlalchemy.orm import Session

from domain.common import RatingChange, RatingHistoryRecord
from models import RatingHistory


def history_to_record(entry: RatingHistory) -> RatingHistoryRecord:
    return RatingHistoryRecord(
        id=entry.id,
        player_id=entry.player_id,
        match_id=entry.match_id,
        rating_before=float(entry.rating_before),
        rating_after=float(entry.rating_after),
        change=float(entry.rating_change),
        created_at=entry.created_at,
    )


def insert_rating_changes(
    session: Session,
    changes: Sequence[RatingChange],
    *,
    match_id: int,
    created_at: datetime,
) -> None:
    """Bulk insert one history row per rating change."""
    if not changes:
        return

    payload = [
        {
            "player_id": change.player_id,
            "match_id": match_id,
            "rating_before": change.rating_before,
            "rating_after": change.rating_after,
            "rating_change": change.change,
            "created_at": created_at,
        }
        for change in changes
    ]
    session.execute(insert(RatingHistory), payload)


def fetch_player_history(session: Session, player_id: int) -> list[RatingHistory]:
    """All history rows of one player, oldest first."""
    statement = (
        select(RatingHistory)
        .where(RatingHistory.player_id == player_id)
        .order_by(RatingHistory.created_at, RatingHistory.id)
    )
    return list(session.execute(statement).scalars())


def average_rating_change(session: Session, player_id: int) -> float:
    result = session.scalar(
        select(func.avg(RatingHistory.rating_change)).where(RatingHistory.player_id == player_id)
    )
    return float(result or 0.0)


def delete_history_for_matches(session: Session, match_ids: Sequence[int]) -> None:
    if not match_ids:
        return
    session.execute(delete(RatingHistory).where(RatingHistory.match_id.in_(match_ids)))


def delete_history_for_player(session: Session, player_id: int, match_ids: Sequence[int] = ()) -> None:
    """Delete a player's own rows plus every row belonging to ``match_ids``."""
    condition = RatingHistory.player_id == player_id
    if match_ids:
        condition = or_(condition, RatingHistory.match_id.in_(match_ids))
    session.execute(delete(RatingHistory).where(condition))
