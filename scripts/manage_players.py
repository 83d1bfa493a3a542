#!/usr/bin/env python3
"""Add, remove and edit roster players."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL
from domain.common import Position
from domain.ranks import classify
from domain.ratings.calculator import format_rating
from domain.ratings.config import select_scoring_parameters
from errors import LedgerError
from services import Services, build_services

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Roster management.",
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
        level=logging.DEBUG if verbose else logging.WARNING,
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


@app.command("add")
def add_player(
    name: Annotated[str, typer.Argument(help="Display name (at least 2 characters).")],
    position: Annotated[Position, typer.Option("--position")] = Position.ATTACK,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    system_name: SystemNameOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a player at the initial rating."""
    ledger = _services(db_url, config, system_name, verbose).ledger
    try:
        player = ledger.add_player(name, position)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"added id={player.id} name={player.name} rating={format_rating(player.current_rating)}")


@app.command("remove")
def remove_player(
    player_id: Annotated[int, typer.Argument()],
    yes: Annotated[bool, typer.Option("--yes", help="Confirm the cascading delete.")] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Delete a player together with all matches they played."""
    if not yes:
        raise typer.BadParameter("pass --yes to delete the player and all of their matches")
    ledger = _services(db_url, None, None, verbose).ledger
    try:
        ledger.remove_player(player_id)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"removed player id={player_id}")


@app.command("set-rating")
def set_rating(
    player_id: Annotated[int, typer.Argument()],
    rating: Annotated[float, typer.Argument()],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    system_name: SystemNameOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Override a player's rating."""
    ledger = _services(db_url, config, system_name, verbose).ledger
    try:
        player = ledger.edit_rating(player_id, rating)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"{player.name}: rating={format_rating(player.current_rating)}")


@app.command("set-position")
def set_position(
    player_id: Annotated[int, typer.Argument()],
    position: Annotated[Position, typer.Argument()],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Change a player's preferred position."""
    ledger = _services(db_url, None, None, verbose).ledger
    try:
        player = ledger.edit_position(player_id, position)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"{player.name}: position={player.preferred_position.value}")


@app.command("list")
def list_players(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Print the roster by name."""
    players = _services(db_url, None, None, verbose).stats.list_players()
    if not players:
        typer.echo("No players yet.")
        return
    for player in players:
        typer.echo(
            f"{player.id:4d}. {player.name:<20} {player.preferred_position.value:<8} "
            f"rating={format_rating(player.current_rating):>5} rank={classify(player.current_rating).name}"
        )


if __name__ == "__main__":
    app()
