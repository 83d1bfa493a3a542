#!/usr/bin/env python3
"""Record or remove 2v2 matches and reset ratings."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, NoReturn

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL
from domain.common import MatchSubmission, Position
from domain.ratings.calculator import format_rating, format_rating_change
from domain.ratings.config import select_scoring_parameters
from errors import LedgerError
from services import Services, build_services

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Match ledger jobs.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        envvar="BABYFOOT_DB_URL",
        help="Database URL. Defaults to a local babyfoot.db SQLite file.",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        envvar="BABYFOOT_SCORING_CONFIG",
        help="Scoring TOML file. Built-in defaults are used when omitted.",
    ),
]
SystemNameOption = Annotated[
    str | None,
    typer.Option(
        "--system-name",
        envvar="BABYFOOT_SCORING_SYSTEM",
        help="Scoring system [system].name looked up in configs/scoring/.",
    ),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _services(db_url: str, config: Path | None, system_name: str | None, verbose: bool) -> Services:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        params = select_scoring_parameters(config_file=config, system_name=system_name)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config/--system-name") from exc
    return build_services(db_url, params)


def _fail(exc: LedgerError) -> NoReturn:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command("record")
def record_match(
    team1: Annotated[tuple[int, int], typer.Option("--team1", help="Attacker and defender ids.")],
    team2: Annotated[tuple[int, int], typer.Option("--team2", help="Attacker and defender ids.")],
    score: Annotated[tuple[int, int], typer.Option("--score", help="Team 1 and team 2 scores.")],
    swap_team1: Annotated[
        bool,
        typer.Option("--swap-team1", help="First team1 id plays defense instead of attack."),
    ] = False,
    swap_team2: Annotated[
        bool,
        typer.Option("--swap-team2", help="First team2 id plays defense instead of attack."),
    ] = False,
    played_at: Annotated[
        datetime | None,
        typer.Option("--played-at", help="When the match was played. Defaults to now (UTC)."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    system_name: SystemNameOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Commit one match and print the four rating changes."""
    first_team1, second_team1 = (
        (Position.DEFENSE, Position.ATTACK) if swap_team1 else (Position.ATTACK, Position.DEFENSE)
    )
    first_team2, second_team2 = (
        (Position.DEFENSE, Position.ATTACK) if swap_team2 else (Position.ATTACK, Position.DEFENSE)
    )

    ledger = _services(db_url, config, system_name, verbose).ledger
    try:
        submission = MatchSubmission(
            team1_player1_id=team1[0],
            team1_player2_id=team1[1],
            team2_player1_id=team2[0],
            team2_player2_id=team2[1],
            team1_score=score[0],
            team2_score=score[1],
            team1_player1_position=first_team1,
            team1_player2_position=second_team1,
            team2_player1_position=first_team2,
            team2_player2_position=second_team2,
            played_at=played_at,
        )
        committed = ledger.commit_match(submission)
    except LedgerError as exc:
        _fail(exc)

    match = committed.match
    typer.echo(
        f"match id={match.id} {match.team1_score}-{match.team2_score} winner=team{match.winner_team} "
        f"points={match.points_delta} (base={match.points_base} x{match.score_multiplier:g})"
    )
    for change in committed.rating_changes:
        typer.echo(
            f"  player={change.player_id:4d} {format_rating(change.rating_before):>5} -> "
            f"{format_rating(change.rating_after):>5} ({format_rating_change(change.change)})"
        )


@app.command("remove")
def remove_match(
    match_id: Annotated[int, typer.Argument()],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Delete a match and its history. Ratings are NOT restored."""
    ledger = _services(db_url, None, None, verbose).ledger
    try:
        ledger.remove_match(match_id)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"removed match id={match_id}; current ratings were left unchanged")


@app.command("reset-ratings")
def reset_ratings(
    yes: Annotated[bool, typer.Option("--yes", help="Confirm the reset.")] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    system_name: SystemNameOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Reset every rating to the initial value and clear points (history is kept)."""
    if not yes:
        raise typer.BadParameter("pass --yes to reset all ratings")
    ledger = _services(db_url, config, system_name, verbose).ledger
    try:
        count = ledger.reset_all_ratings()
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"reset players={count} rating={format_rating(ledger.params.initial_rating)}")


if __name__ == "__main__":
    app()
