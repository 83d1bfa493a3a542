#!/usr/bin/env python3
"""Show the leaderboard and per-player statistics."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL
from domain.ranks import classify, progress_within_tier
from domain.ratings.calculator import format_rating, format_rating_change
from domain.ratings.config import select_scoring_parameters
from errors import NotFoundError
from services import StatsAggregator, build_services

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query ratings and statistics.",
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


def _stats(db_url: str, config: Path | None, system_name: str | None) -> StatsAggregator:
    try:
        params = select_scoring_parameters(config_file=config, system_name=system_name)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config/--system-name") from exc
    return build_services(db_url, params).stats


@app.command("leaderboard")
def show_leaderboard(
    top_n: Annotated[int, typer.Option("--top-n", help="Number of players to show (0 for all).")] = 0,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    system_name: SystemNameOption = None,
) -> None:
    """Print players by rating with record and rank tier."""
    if top_n < 0:
        raise typer.BadParameter("--top-n must be >= 0")

    entries = _stats(db_url, config, system_name).leaderboard()
    if top_n:
        entries = entries[:top_n]
    if not entries:
        typer.echo("No players yet.")
        return

    for entry in entries:
        tier = classify(entry.current_rating)
        typer.echo(
            f"{entry.rank:2d}. {entry.player_name:<20} "
            f"rating={format_rating(entry.current_rating):>5} {tier.name:<10} "
            f"games={entry.games_played:3d} W-L={entry.wins}-{entry.losses} "
            f"win_rate={entry.win_rate:5.1f}%"
        )


@app.command("player")
def show_player(
    player_id: Annotated[int, typer.Argument()],
    limit: Annotated[int, typer.Option("--limit", help="Rows per partner/opponent/recent list.")] = 5,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    system_name: SystemNameOption = None,
) -> None:
    """Print a player's summary, best partners, toughest opponents and recent form."""
    if limit <= 0:
        raise typer.BadParameter("--limit must be greater than 0")

    stats = _stats(db_url, config, system_name)
    try:
        summary = stats.player_summary(player_id)
        partners = stats.best_partners(player_id, limit)
        opponents = stats.toughest_opponents(player_id, limit)
        recent = stats.recent_performance(player_id, limit)
    except NotFoundError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    tier = classify(summary.current_rating)
    typer.echo(
        f"{summary.player_name} rating={format_rating(summary.current_rating)} "
        f"rank={tier.name} ({progress_within_tier(summary.current_rating):.0f}%)"
    )
    typer.echo(
        f"games={summary.games_played} W-L={summary.wins}-{summary.losses} "
        f"win_rate={summary.win_rate:.1f}% avg_change={summary.avg_rating_change:+.1f}"
    )
    typer.echo(
        f"attack: games={summary.attack.games_played} win_rate={summary.attack.win_rate:.1f}%  "
        f"defense: games={summary.defense.games_played} win_rate={summary.defense.win_rate:.1f}%"
    )

    typer.echo("best partners:")
    for partner in partners:
        typer.echo(
            f"  {partner.partner_name:<20} games={partner.games_played:3d} "
            f"win_rate={partner.win_rate:5.1f}%"
        )
    typer.echo("toughest opponents:")
    for opponent in opponents:
        typer.echo(
            f"  {opponent.opponent_name:<20} games={opponent.games_played:3d} "
            f"W-L={opponent.wins}-{opponent.losses} "
            f"their_win_rate={opponent.opponent_win_rate:5.1f}%"
        )
    typer.echo("recent:")
    for performance in recent:
        typer.echo(
            f"  {performance.played_at:%Y-%m-%d %H:%M} {'W' if performance.won else 'L'} "
            f"{format_rating_change(performance.rating_change):>4} -> "
            f"{format_rating(performance.rating_after)}"
        )


@app.command("history")
def show_history(
    player_id: Annotated[int, typer.Argument()],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    system_name: SystemNameOption = None,
) -> None:
    """Print the rating time series of one player."""
    try:
        points = _stats(db_url, config, system_name).rating_history(player_id)
    except NotFoundError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for point in points:
        typer.echo(f"{point.timestamp:%Y-%m-%d %H:%M:%S} {format_rating(point.rating)}")


if __name__ == "__main__":
    app()
