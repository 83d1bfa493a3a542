"""Persistence helpers for the players table."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.common import PlayerRecord, Position
from models import Player

# Index created by `unique=True, index=True` on Player.name.
NAME_INDEX = "ix_players_name"


def player_to_record(player: Player) -> PlayerRecord:
    return PlayerRecord(
        id=player.id,
        name=player.name,
        preferred_position=Position(player.preferred_position),
        current_rating=float(player.current_rating),
        points_won=int(player.points_won),
        points_lost=int(player.points_lost),
        created_at=player.created_at,
        updated_at=player.updated_at,
    )


def get_player(session: Session, player_id: int) -> Player | None:
    return session.get(Player, player_id)


def get_players(session: Session, player_ids: Sequence[int]) -> dict[int, Player]:
    """Fetch several players at once, keyed by id; unknown ids are absent."""
    if not player_ids:
        return {}
    rows = session.execute(select(Player).where(Player.id.in_(set(player_ids)))).scalars().all()
    return {player.id: player for player in rows}


def list_players(session: Session) -> list[Player]:
    """All players in display order (name ascending)."""
    return list(session.execute(select(Player).order_by(Player.name, Player.id)).scalars())


def insert_player(
    session: Session,
    *,
    name: str,
    preferred_position: Position,
    initial_rating: float,
    now: datetime,
) -> Player:
    player = Player(
        name=name,
        preferred_position=preferred_position.value,
        current_rating=initial_rating,
        points_won=0,
        points_lost=0,
        created_at=now,
        updated_at=now,
    )
    session.add(player)
    session.flush()
    return player


def is_duplicate_name_error(exc: IntegrityError) -> bool:
    """True when the violation comes from the unique index on players.name."""
    message = str(exc.orig)
    return "players.name" in message or NAME_INDEX in message


def delete_player(session: Session, player: Player) -> None:
    session.delete(player)
    session.flush()


def reset_all_ratings(session: Session, *, initial_rating: float, now: datetime) -> int:
    """Reset every rating and points counter in one statement; returns rows touched."""
    result = session.execute(
        update(Player).values(
            current_rating=initial_rating,
            points_won=0,
            points_lost=0,
            updated_at=now,
        )
    )
    return int(result.rowcount or 0)
