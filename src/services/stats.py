"""Read-only statistics derived from persisted matches and rating history."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Float, and_, cast, func, select
from sqlalchemy.orm import Session, sessionmaker

from domain.common import MatchRecord, PlayerRecord, Position
from domain.ratings.calculator import DEFAULT_PARAMETERS, ScoringParameters
from errors import NotFoundError
from models import Match, Player, RatingHistory
from repositories import matches as matches_repo
from repositories import players as players_repo
from repositories import rating_history as history_repo
from services.ledger import utcnow

logger = logging.getLogger(__name__)


def win_rate(wins: int, games: int) -> float:
    """Win percentage in [0, 100]; 0 when no games were played."""
    return (wins / games) * 100.0 if games > 0 else 0.0


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    player_id: int
    player_name: str
    current_rating: float
    games_played: int
    wins: int
    losses: int
    win_rate: float


@dataclass(frozen=True)
class PositionSummary:
    games_played: int
    wins: int
    win_rate: float


@dataclass(frozen=True)
class PlayerSummary:
    player_id: int
    player_name: str
    current_rating: float
    games_played: int
    wins: int
    losses: int
    win_rate: float
    avg_rating_change: float
    attack: PositionSummary
    defense: PositionSummary


@dataclass(frozen=True)
class PartnerStats:
    partner_id: int
    partner_name: str
    games_played: int
    wins: int
    win_rate: float


@dataclass(frozen=True)
class OpponentStats:
    """Head-to-head record against one opposing player.

    ``wins`` counts the shared matches the player won; ``opponent_win_rate``
    is the share of shared matches the opponent's team won.
    """

    opponent_id: int
    opponent_name: str
    games_played: int
    wins: int
    losses: int
    win_rate: float
    opponent_win_rate: float


@dataclass(frozen=True)
class RecentPerformance:
    match_id: int
    played_at: datetime
    won: bool
    rating_change: float
    rating_after: float


@dataclass(frozen=True)
class RatingPoint:
    timestamp: datetime
    rating: float


@dataclass(frozen=True)
class MatchWithNames:
    match: MatchRecord
    team1_player1_name: str
    team1_player2_name: str
    team2_player1_name: str
    team2_player2_name: str


class StatsAggregator:
    """Leaderboard and per-player analytics over the injected session factory."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        params: ScoringParameters = DEFAULT_PARAMETERS,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self.params = params
        self._clock = clock

    def _require_player(self, session: Session, player_id: int) -> Player:
        player = players_repo.get_player(session, player_id)
        if player is None:
            raise NotFoundError("player", player_id)
        return player

    def list_players(self) -> list[PlayerRecord]:
        with self._session_factory() as session:
            return [players_repo.player_to_record(player) for player in players_repo.list_players(session)]

    def get_player(self, player_id: int) -> PlayerRecord:
        with self._session_factory() as session:
            return players_repo.player_to_record(self._require_player(session, player_id))

    def get_match(self, match_id: int) -> MatchRecord:
        with self._session_factory() as session:
            match = matches_repo.get_match(session, match_id)
            if match is None:
                raise NotFoundError("match", match_id)
            return matches_repo.match_to_record(match)

    def recent_matches(self, limit: int = 10) -> list[MatchWithNames]:
        """Latest matches by played_at, with the four participant names."""
        with self._session_factory() as session:
            records = [
                matches_repo.match_to_record(match)
                for match in matches_repo.fetch_recent_matches(session, limit)
            ]
            player_ids = {player_id for record in records for player_id in record.player_ids}
            names = {
                player_id: player.name
                for player_id, player in players_repo.get_players(session, list(player_ids)).items()
            }
            return [
                MatchWithNames(
                    match=record,
                    team1_player1_name=names[record.team1_player1_id],
                    team1_player2_name=names[record.team1_player2_id],
                    team2_player1_name=names[record.team2_player1_id],
                    team2_player2_name=names[record.team2_player2_id],
                )
                for record in records
            ]

    def leaderboard(self) -> list[LeaderboardEntry]:
        """All players by rating descending (ties broken by id ascending), ranked 1..N."""
        participation = matches_repo.participation_subquery()
        totals = (
            select(
                participation.c.player_id,
                func.count().label("games_played"),
                func.sum(participation.c.won).label("wins"),
            )
            .group_by(participation.c.player_id)
            .subquery("totals")
        )
        statement = (
            select(
                Player.id,
                Player.name,
                Player.current_rating,
                func.coalesce(totals.c.games_played, 0).label("games_played"),
                func.coalesce(totals.c.wins, 0).label("wins"),
            )
            .select_from(Player)
            .outerjoin(totals, totals.c.player_id == Player.id)
            .order_by(Player.current_rating.desc(), Player.id.asc())
        )

        with self._session_factory() as session:
            rows = session.execute(statement).all()

        entries: list[LeaderboardEntry] = []
        for rank, row in enumerate(rows, start=1):
            games_played = int(row.games_played)
            wins = int(row.wins)
            entries.append(
                LeaderboardEntry(
                    rank=rank,
                    player_id=row.id,
                    player_name=row.name,
                    current_rating=float(row.current_rating),
                    games_played=games_played,
                    wins=wins,
                    losses=games_played - wins,
                    win_rate=win_rate(wins, games_played),
                )
            )
        logger.debug("leaderboard computed for %d players", len(entries))
        return entries

    def player_summary(self, player_id: int) -> PlayerSummary:
        """Overall record, average rating change and attack/defense split."""
        participation = matches_repo.participation_subquery()
        statement = (
            select(
                participation.c.position,
                func.count().label("games_played"),
                func.sum(participation.c.won).label("wins"),
            )
            .where(participation.c.player_id == player_id)
            .group_by(participation.c.position)
        )

        with self._session_factory() as session:
            player = self._require_player(session, player_id)
            by_position = {
                Position(row.position): (int(row.games_played), int(row.wins or 0))
                for row in session.execute(statement)
            }
            avg_change = history_repo.average_rating_change(session, player_id)
            name = player.name
            rating = float(player.current_rating)

        positions: dict[Position, PositionSummary] = {}
        for position in Position:
            games, position_wins = by_position.get(position, (0, 0))
            positions[position] = PositionSummary(
                games_played=games,
                wins=position_wins,
                win_rate=win_rate(position_wins, games),
            )
        games_played = sum(summary.games_played for summary in positions.values())
        wins = sum(summary.wins for summary in positions.values())
        return PlayerSummary(
            player_id=player_id,
            player_name=name,
            current_rating=rating,
            games_played=games_played,
            wins=wins,
            losses=games_played - wins,
            win_rate=win_rate(wins, games_played),
            avg_rating_change=avg_change,
            attack=positions[Position.ATTACK],
            defense=positions[Position.DEFENSE],
        )

    def _head_to_head_rows(self, session: Session, player_id: int, *, same_team: bool, limit: int):
        me = matches_repo.participation_subquery("me")
        other = matches_repo.participation_subquery("other")
        team_condition = other.c.team == me.c.team if same_team else other.c.team != me.c.team
        games_played = func.count().label("games_played")
        wins = func.sum(me.c.won).label("wins")
        player_win_rate = cast(func.sum(me.c.won), Float) / func.count()

        statement = (
            select(other.c.player_id, Player.name, games_played, wins)
            .select_from(me)
            .join(
                other,
                and_(
                    other.c.match_id == me.c.match_id,
                    other.c.player_id != me.c.player_id,
                    team_condition,
                ),
            )
            .join(Player, Player.id == other.c.player_id)
            .where(me.c.player_id == player_id)
            .group_by(other.c.player_id, Player.name)
            .order_by(
                player_win_rate.desc() if same_team else player_win_rate.asc(),
                func.count().desc(),
                other.c.player_id.asc(),
            )
            .limit(limit)
        )
        return session.execute(statement).all()

    def best_partners(self, player_id: int, limit: int = 5) -> list[PartnerStats]:
        """Teammates by win rate together (desc), then games together (desc)."""
        with self._session_factory() as session:
            self._require_player(session, player_id)
            rows = self._head_to_head_rows(session, player_id, same_team=True, limit=limit)

        return [
            PartnerStats(
                partner_id=row.player_id,
                partner_name=row.name,
                games_played=int(row.games_played),
                wins=int(row.wins),
                win_rate=win_rate(int(row.wins), int(row.games_played)),
            )
            for row in rows
        ]

    def toughest_opponents(self, player_id: int, limit: int = 5) -> list[OpponentStats]:
        """Opponents the player beats least often first, then by games faced (desc)."""
        with self._session_factory() as session:
            self._require_player(session, player_id)
            rows = self._head_to_head_rows(session, player_id, same_team=False, limit=limit)

        opponents: list[OpponentStats] = []
        for row in rows:
            games_played = int(row.games_played)
            wins = int(row.wins)
            losses = games_played - wins
            opponents.append(
                OpponentStats(
                    opponent_id=row.player_id,
                    opponent_name=row.name,
                    games_played=games_played,
                    wins=wins,
                    losses=losses,
                    win_rate=win_rate(wins, games_played),
                    opponent_win_rate=win_rate(losses, games_played),
                )
            )
        return opponents

    def recent_performance(self, player_id: int, limit: int = 10) -> list[RecentPerformance]:
        """Latest rating changes of a player, most recently played match first."""
        statement = (
            select(RatingHistory, Match)
            .select_from(RatingHistory)
            .join(Match, Match.id == RatingHistory.match_id)
            .where(RatingHistory.player_id == player_id)
            .order_by(Match.played_at.desc(), Match.id.desc())
            .limit(limit)
        )

        with self._session_factory() as session:
            self._require_player(session, player_id)
            rows = [
                (history_repo.history_to_record(entry), matches_repo.match_to_record(match))
                for entry, match in session.execute(statement).all()
            ]

        return [
            RecentPerformance(
                match_id=entry.match_id,
                played_at=match.played_at,
                won=match.won_by(player_id),
                rating_change=entry.change,
                rating_after=entry.rating_after,
            )
            for entry, match in rows
        ]

    def rating_history(self, player_id: int) -> list[RatingPoint]:
        """Rating after each match, oldest first.

        A player without history gets one synthetic point at the initial
        rating so there is always something to plot.
        """
        with self._session_factory() as session:
            self._require_player(session, player_id)
            entries = [
                history_repo.history_to_record(entry)
                for entry in history_repo.fetch_player_history(session, player_id)
            ]

        if not entries:
            return [RatingPoint(timestamp=self._clock(), rating=self.params.initial_rating)]
        return [RatingPoint(timestamp=entry.created_at, rating=entry.rating_after) for entry in entries]
