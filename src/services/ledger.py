"""Transactional application of match results to player ratings."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from math import isfinite

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from domain.common import (
    MatchRecord,
    MatchSubmission,
    PlayerRecord,
    Position,
    RatingChange,
    normalize_player_name,
)
from domain.ratings.calculator import (
    DEFAULT_PARAMETERS,
    PointTransfer,
    ScoringParameters,
    apply_rating_change,
    compute_transfer,
    team_average,
)
from errors import (
    ConstraintError,
    LedgerError,
    NotFoundError,
    TransactionFailure,
    ValidationError,
)
from models import Player
from repositories import matches as matches_repo
from repositories import players as players_repo
from repositories import rating_history as history_repo

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class CommittedMatch:
    match: MatchRecord
    rating_changes: tuple[RatingChange, ...]


class Ledger:
    """Owns every write to players, matches and rating history.

    Each public operation runs in its own transaction obtained from the
    injected session factory: either all of its effects are committed or the
    transaction is rolled back and an error is raised.
    """

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

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Session]:
        try:
            with self._session_factory.begin() as session:
                yield session
        except LedgerError as exc:
            logger.debug("%s rejected: %s", operation, exc)
            raise
        except SQLAlchemyError as exc:
            logger.error("%s rolled back: %s", operation, exc)
            raise TransactionFailure(f"{operation} failed and was rolled back") from exc

    def _require_player(self, session: Session, player_id: int) -> Player:
        player = players_repo.get_player(session, player_id)
        if player is None:
            raise NotFoundError("player", player_id)
        return player

    def add_player(self, name: str, preferred_position: Position | str = Position.ATTACK) -> PlayerRecord:
        """Create a player at the initial rating; names must be unique."""
        normalized = normalize_player_name(name)
        position = Position.parse(preferred_position)
        now = self._clock()

        with self._transaction("add_player") as session:
            try:
                player = players_repo.insert_player(
                    session,
                    name=normalized,
                    preferred_position=position,
                    initial_rating=self.params.initial_rating,
                    now=now,
                )
            except IntegrityError as exc:
                if not players_repo.is_duplicate_name_error(exc):
                    raise
                raise ConstraintError(f"player name {normalized!r} is already taken") from exc
            record = players_repo.player_to_record(player)

        logger.info("added player id=%s name=%r position=%s", record.id, record.name, position.value)
        return record

    def remove_player(self, player_id: int) -> None:
        """Hard-delete a player together with every match they played and its history.

        Ratings of the other participants in those matches are left as they are.
        """
        with self._transaction("remove_player") as session:
            player = self._require_player(session, player_id)
            match_ids = matches_repo.fetch_match_ids_for_player(session, player_id)
            history_repo.delete_history_for_player(session, player_id, match_ids)
            matches_repo.delete_matches(session, match_ids)
            players_repo.delete_player(session, player)

        logger.warning("removed player id=%s with %d matches", player_id, len(match_ids))

    def edit_rating(self, player_id: int, new_rating: float) -> PlayerRecord:
        """Manually override a rating, bypassing the scoring engine."""
        if not isinstance(new_rating, (int, float)) or not isfinite(new_rating):
            raise ValidationError(f"rating must be a finite number, got {new_rating!r}")
        if new_rating < self.params.min_manual_rating:
            raise ValidationError(
                f"rating must be >= {self.params.min_manual_rating:g}, got {new_rating:g}"
            )

        with self._transaction("edit_rating") as session:
            player = self._require_player(session, player_id)
            previous = player.current_rating
            player.current_rating = float(new_rating)
            player.updated_at = self._clock()
            session.flush()
            record = players_repo.player_to_record(player)

        logger.info("player id=%s rating set %.1f -> %.1f", player_id, previous, record.current_rating)
        return record

    def edit_position(self, player_id: int, position: Position | str) -> PlayerRecord:
        parsed = Position.parse(position)
        with self._transaction("edit_position") as session:
            player = self._require_player(session, player_id)
            player.preferred_position = parsed.value
            player.updated_at = self._clock()
            session.flush()
            return players_repo.player_to_record(player)

    def commit_match(self, submission: MatchSubmission) -> CommittedMatch:
        """Validate, score and persist one match atomically.

        Both members of the winning team gain ``points_effective`` and both
        members of the losing team lose it. Stored ratings are floored, while
        the history row keeps the unfloored transfer so that the four changes
        of a match always sum to zero.
        """
        now = self._clock()
        played_at = submission.played_at or now

        with self._transaction("commit_match") as session:
            players = players_repo.get_players(session, submission.player_ids)
            for player_id in submission.player_ids:
                if player_id not in players:
                    raise NotFoundError("player", player_id)
            lineup = [players[player_id] for player_id in submission.player_ids]

            team1_rating = team_average(lineup[0].current_rating, lineup[1].current_rating)
            team2_rating = team_average(lineup[2].current_rating, lineup[3].current_rating)
            transfer = self._score(submission, team1_rating, team2_rating)
            team_changes = (
                {1: transfer.winner_change, 2: transfer.loser_change}
                if submission.winner_team == 1
                else {1: transfer.loser_change, 2: transfer.winner_change}
            )

            match = matches_repo.insert_match(
                session,
                submission,
                team1_rating_before=team1_rating,
                team2_rating_before=team2_rating,
                transfer=transfer,
                played_at=played_at,
                created_at=now,
            )

            changes: list[RatingChange] = []
            for player, team in zip(lineup, (1, 1, 2, 2)):
                changes.append(self._apply_change(player, team_changes[team], now))
            history_repo.insert_rating_changes(session, changes, match_id=match.id, created_at=now)
            session.flush()
            record = matches_repo.match_to_record(match)

        logger.info(
            "committed match id=%s score=%d-%d winner=team%d points=%d (base=%d x%.1f)",
            record.id,
            record.team1_score,
            record.team2_score,
            record.winner_team,
            transfer.points_effective,
            transfer.points_base,
            transfer.multiplier,
        )
        return CommittedMatch(match=record, rating_changes=tuple(changes))

    def _score(self, submission: MatchSubmission, team1_rating: float, team2_rating: float) -> PointTransfer:
        if submission.winner_team == 1:
            return compute_transfer(
                team1_rating,
                team2_rating,
                submission.team1_score,
                submission.team2_score,
                self.params,
            )
        return compute_transfer(
            team2_rating,
            team1_rating,
            submission.team2_score,
            submission.team1_score,
            self.params,
        )

    def _apply_change(self, player: Player, change: int, now: datetime) -> RatingChange:
        rating_before = float(player.current_rating)
        rating_after = apply_rating_change(rating_before, change, self.params)
        player.current_rating = rating_after
        if change > 0:
            player.points_won += change
        elif change < 0:
            player.points_lost += -change
        player.updated_at = now
        return RatingChange(
            player_id=player.id,
            rating_before=rating_before,
            rating_after=rating_after,
            change=change,
        )

    def remove_match(self, match_id: int) -> None:
        """Delete a match and its history rows.

        Ratings are forward-only: the rating effect of the match is not undone.
        """
        with self._transaction("remove_match") as session:
            match = matches_repo.get_match(session, match_id)
            if match is None:
                raise NotFoundError("match", match_id)
            history_repo.delete_history_for_matches(session, [match_id])
            session.delete(match)

        logger.warning("removed match id=%s; player ratings were not restored", match_id)

    def reset_all_ratings(self) -> int:
        """Set every rating to the initial value and clear points counters.

        Matches and rating history are kept. Returns the number of players reset.
        """
        with self._transaction("reset_all_ratings") as session:
            count = players_repo.reset_all_ratings(
                session,
                initial_rating=self.params.initial_rating,
                now=self._clock(),
            )

        logger.warning("reset ratings of %d players to %.1f", count, self.params.initial_rating)
        return count
