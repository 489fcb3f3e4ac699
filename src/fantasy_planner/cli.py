from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Optional

import click

from .adjustments import ProjectionPipeline
from .alerts import get_alerts
from .rankings import get_draft_rankings, get_rankings
from .recommendations import get_recommendations, get_waivers
from .reference import LeagueConfig, ReferenceData
from .roster import project_roster, total_projection
from .settings import AppSettings, get_settings
from .simulation import SIMULATION_MODES, SimulationMove, simulate
from .stats_store import StatsStore
from .strategy import get_season_strategy
from .trade import analyze_trade


def _env_rows(settings: AppSettings) -> list[tuple[str, str]]:
    return [
        ("DATA_ROOT", str(settings.data_root)),
        ("FANTASY_SEASON", str(settings.season)),
        ("REFERENCE_PATH", str(settings.reference_path or "")),
        ("LEAGUE_CONFIG_PATH", str(settings.league_config_path or "")),
        ("LOG_LEVEL", settings.log_level),
    ]


def _split_ids(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_weeks(raw: Optional[str], default: tuple[int, ...]) -> list[int]:
    if not raw:
        return list(default)
    try:
        return [int(item) for item in _split_ids(raw)]
    except ValueError:
        raise click.BadParameter(f"Expected comma-separated week numbers, got {raw!r}") from None


def _json_default(value: object) -> object:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _echo_json(payload: object) -> None:
    click.echo(json.dumps(payload, indent=2, default=_json_default))


class _Context:
    def __init__(self, env_file: Path, season: Optional[int], reference_path: Optional[Path]) -> None:
        self.settings = get_settings(env_file)
        logging.basicConfig(
            level=getattr(logging, self.settings.log_level.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        league_path = self.settings.league_config_path
        try:
            self.league = LeagueConfig.load(league_path) if league_path else LeagueConfig()
            self.season = season or self.league.season or self.settings.season

            ref_path = reference_path or self.settings.reference_path
            reference = ReferenceData.load(ref_path) if ref_path else ReferenceData.default()
            store = StatsStore.for_settings(self.settings, self.season)
        except (FileNotFoundError, ValueError) as exc:
            raise click.ClickException(str(exc)) from exc

        self.pipeline = ProjectionPipeline(store, reference)


def _common_options(func):
    func = click.option(
        "--env-file",
        type=click.Path(path_type=Path, dir_okay=False, exists=False, readable=True),
        default=".env",
        show_default=True,
        help="Path to the .env file to load.",
    )(func)
    func = click.option(
        "--reference",
        "reference_path",
        type=click.Path(path_type=Path, dir_okay=False, exists=True, readable=True),
        default=None,
        help="YAML file with injury and schedule-strength tables (defaults to built-in tables).",
    )(func)
    func = click.option(
        "--season", type=int, default=None, help="Season to project (defaults to FANTASY_SEASON in .env)."
    )(func)
    return func


@click.group()
def cli() -> None:
    """Fantasy roster projection and what-if planning CLI."""


@cli.command()
@click.option(
    "--env-file",
    type=click.Path(path_type=Path, dir_okay=False, exists=False, readable=True),
    default=".env",
    show_default=True,
    help="Path to the .env file to load.",
)
def env(env_file: Path) -> None:
    """Show the current environment configuration."""

    settings = get_settings(env_file)
    rows = _env_rows(settings)
    width = max(len(key) for key, _ in rows)
    for key, value in rows:
        click.echo(f"{key.ljust(width)} : {value}")


@cli.command("project")
@click.option("--roster", required=True, help="Comma-separated player ids or names.")
@click.option("--no-injuries", is_flag=True, help="Skip the injury adjustment.")
@_common_options
def project_cmd(
    roster: str,
    no_injuries: bool,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Project every roster entry with injury, schedule and trend factors."""

    ctx = _Context(env_file, season, reference_path)
    players = project_roster(ctx.pipeline, _split_ids(roster), ctx.season, not no_injuries)
    _echo_json(
        {
            "season": ctx.season,
            "total_projection": total_projection(players),
            "players": [player.to_dict() for player in players],
        }
    )


@cli.command("simulate")
@click.option("--mode", type=click.Choice(SIMULATION_MODES), required=True)
@click.option("--roster", required=True, help="Comma-separated player ids or names.")
@click.option(
    "--move",
    "moves",
    multiple=True,
    help="Move as add:ID[:SLOT], remove:ID or swap:ID:WITH. Repeat to apply several in order.",
)
@click.option("--no-injuries", is_flag=True, help="Skip the injury adjustment.")
@_common_options
def simulate_cmd(
    mode: str,
    roster: str,
    moves: tuple[str, ...],
    no_injuries: bool,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Compare roster projections before and after a sequence of moves."""

    try:
        parsed = [SimulationMove.parse(text) for text in moves]
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--move") from exc

    ctx = _Context(env_file, season, reference_path)
    result = simulate(
        ctx.pipeline,
        mode,
        _split_ids(roster),
        parsed,
        dict(ctx.league.roster_slots),
        season=ctx.season,
        include_injuries=not no_injuries,
        starter_count=ctx.league.starter_count,
    )
    _echo_json(result.to_dict())


@cli.command("trade")
@click.option("--roster", required=True, help="Comma-separated player ids or names.")
@click.option("--give", required=True, help="Comma-separated identifiers to trade away.")
@click.option("--receive", required=True, help="Comma-separated identifiers to receive.")
@click.option("--playoff-weeks", default=None, help="Comma-separated playoff weeks (defaults to league config).")
@click.option("--no-injuries", is_flag=True, help="Skip the injury adjustment.")
@_common_options
def trade_cmd(
    roster: str,
    give: str,
    receive: str,
    playoff_weeks: Optional[str],
    no_injuries: bool,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Evaluate a trade across weeks 1-18 and the playoff window."""

    ctx = _Context(env_file, season, reference_path)
    analysis = analyze_trade(
        ctx.pipeline,
        _split_ids(roster),
        _split_ids(give),
        _split_ids(receive),
        _parse_weeks(playoff_weeks, ctx.league.playoff_weeks),
        not no_injuries,
        season=ctx.season,
        starter_count=ctx.league.starter_count,
    )
    _echo_json(analysis.to_dict())


@cli.command("strategy")
@click.option("--roster", required=True, help="Comma-separated player ids or names.")
@click.option("--starters", required=True, help="Comma-separated starter identifiers.")
@click.option("--playoff-weeks", default=None, help="Comma-separated playoff weeks (defaults to league config).")
@click.option("--no-injuries", is_flag=True, help="Skip the injury adjustment.")
@_common_options
def strategy_cmd(
    roster: str,
    starters: str,
    playoff_weeks: Optional[str],
    no_injuries: bool,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """List starters facing tough playoff matchups, with pickup suggestions."""

    ctx = _Context(env_file, season, reference_path)
    issues = get_season_strategy(
        ctx.pipeline,
        _split_ids(roster),
        _split_ids(starters),
        _parse_weeks(playoff_weeks, ctx.league.playoff_weeks),
        not no_injuries,
        season=ctx.season,
    )
    _echo_json([issue.to_dict() for issue in issues])


@cli.command("alerts")
@click.option("--week", type=int, required=True, help="Week the alerts are for.")
@click.option("--roster", required=True, help="Comma-separated player ids or names.")
@click.option("--starters", required=True, help="Comma-separated starter identifiers.")
@click.option("--no-injuries", is_flag=True, help="Skip the injury adjustment.")
@_common_options
def alerts_cmd(
    week: int,
    roster: str,
    starters: str,
    no_injuries: bool,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Injury, matchup, waiver, cold-streak and lineup alerts ranked by gain."""

    ctx = _Context(env_file, season, reference_path)
    alerts = get_alerts(
        ctx.pipeline,
        week,
        _split_ids(roster),
        _split_ids(starters),
        not no_injuries,
        season=ctx.season,
        starter_count=ctx.league.starter_count,
    )
    _echo_json([alert.to_dict() for alert in alerts])


@cli.command("start-sit")
@click.option("--week", type=int, required=True)
@click.option("--position", default=None, help="Restrict to one position (QB, RB, WR, TE, K, DEF).")
@click.option("--limit", type=int, default=50, show_default=True)
@click.option("--roster", default=None, help="Comma-separated player names to limit the output to.")
@click.option("--no-injuries", is_flag=True, help="Skip the injury adjustment.")
@_common_options
def start_sit_cmd(
    week: int,
    position: Optional[str],
    limit: int,
    roster: Optional[str],
    no_injuries: bool,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Start/sit calls from recent scoring and schedule strength."""

    ctx = _Context(env_file, season, reference_path)
    _echo_json(
        get_recommendations(
            ctx.pipeline,
            week,
            position.upper() if position else None,
            limit,
            _split_ids(roster),
            not no_injuries,
            season=ctx.season,
        )
    )


@cli.command("waivers")
@click.option("--week", type=int, required=True)
@click.option("--position", default=None, help="Restrict to one position (QB, RB, WR, TE, K, DEF).")
@click.option("--limit", type=int, default=50, show_default=True)
@click.option("--roster", default=None, help="Comma-separated rostered player names to exclude.")
@_common_options
def waivers_cmd(
    week: int,
    position: Optional[str],
    limit: int,
    roster: Optional[str],
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Rank waiver-wire pickups by rest-of-season projection."""

    ctx = _Context(env_file, season, reference_path)
    _echo_json(
        get_waivers(
            ctx.pipeline,
            week,
            position.upper() if position else None,
            limit,
            _split_ids(roster),
            season=ctx.season,
        )
    )


@cli.command("rankings")
@click.option("--week", type=int, default=None, help="Rank a single week instead of the whole season.")
@click.option("--position", default=None, help="Restrict to one position (QB, RB, WR, TE, K, DEF).")
@click.option("--limit", type=click.IntRange(min=0), default=50, show_default=True)
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
@_common_options
def rankings_cmd(
    week: Optional[int],
    position: Optional[str],
    limit: int,
    offset: int,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Rank players by total points for the season or one week."""

    ctx = _Context(env_file, season, reference_path)
    payload = get_rankings(ctx.pipeline.store, ctx.season, week, position, limit, offset)
    _echo_json({**payload, "season": ctx.season, "week": week})


@cli.command("draft-rankings")
@click.option("--position", default=None, help="Restrict to one position (QB, RB, WR, TE, K, DEF).")
@click.option("--limit", type=click.IntRange(min=0), default=50, show_default=True)
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
@_common_options
def draft_rankings_cmd(
    position: Optional[str],
    limit: int,
    offset: int,
    season: Optional[int],
    reference_path: Optional[Path],
    env_file: Path,
) -> None:
    """Draft board with consistency, boom/bust rates and point tiers."""

    ctx = _Context(env_file, season, reference_path)
    payload = get_draft_rankings(ctx.pipeline.store, ctx.season, position, limit, offset)
    _echo_json({**payload, "season": ctx.season})


__all__ = ["cli"]
