"""Weekly roster alerts ranked by projected point gain."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence

from .adjustments import TREND_COLD, PlayerProjection, ProjectionPipeline
from .lineup import select_optimal_lineup
from .reference import DEFAULT_STARTER_COUNT, SOS_HARD
from .roster import project_roster, total_projection
from .simulation import SimulationMove

LOGGER = logging.getLogger(__name__)

ALERT_INJURY = "injury"
ALERT_BAD_MATCHUP = "bad_matchup"
ALERT_WAIVER_OPPORTUNITY = "waiver_opportunity"
ALERT_COLD_STREAK = "cold_streak"
ALERT_LINEUP_OPTIMIZATION = "lineup_optimization"

ALERTING_INJURY_STATUSES = ("Q", "O", "IR", "Doubtful")
INJURY_IMPACTS = {
    "Q": "-15% projection",
    "O": "-100% projection",
    "IR": "-100% projection",
    "Doubtful": "-25% projection",
    "Probable": "-5% projection",
}
DEFAULT_INJURY_IMPACT = "-10% projection"

WAIVER_POOL_SIZE = 100
WAIVER_IMPROVEMENT_PCT = 10.0
LINEUP_GAIN_THRESHOLD = 5.0


@dataclass
class Alert:
    type: str
    player: str
    detail: str
    impact: str
    projected_gain: Optional[float] = None
    suggested_move: Optional[SimulationMove] = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def injury_impact(status: str) -> str:
    return INJURY_IMPACTS.get(status, DEFAULT_INJURY_IMPACT)


def _is_starter(player: PlayerProjection, starters: Sequence[str]) -> bool:
    return any(player.matches(identifier) for identifier in starters)


def injury_alerts(roster_players: Sequence[PlayerProjection]) -> List[Alert]:
    return [
        Alert(
            type=ALERT_INJURY,
            player=player.name,
            detail=f"{player.injury_status} status",
            impact=injury_impact(player.injury_status),
        )
        for player in roster_players
        if player.injury_status in ALERTING_INJURY_STATUSES
    ]


def bad_matchup_alerts(starter_players: Sequence[PlayerProjection]) -> List[Alert]:
    return [
        Alert(
            type=ALERT_BAD_MATCHUP,
            player=player.name,
            detail=f"Facing top-5 defense vs {player.position}",
            impact="-5% projection",
        )
        for player in starter_players
        if player.sos_label == SOS_HARD
    ]


def waiver_alerts(
    starter_players: Sequence[PlayerProjection],
    waiver_players: Sequence[PlayerProjection],
) -> List[Alert]:
    alerts: List[Alert] = []
    for waiver_player in waiver_players:
        same_position = [p for p in starter_players if p.position == waiver_player.position]
        if not same_position:
            continue
        weakest = min(same_position, key=lambda p: p.final_projection)
        if weakest.final_projection <= 0:
            continue

        gain = waiver_player.final_projection - weakest.final_projection
        improvement = gain / weakest.final_projection * 100
        if improvement < WAIVER_IMPROVEMENT_PCT:
            continue

        alerts.append(
            Alert(
                type=ALERT_WAIVER_OPPORTUNITY,
                player=waiver_player.name,
                detail=f"+{improvement:.1f}% better than {weakest.name}",
                impact=f"+{gain:.1f} points",
                projected_gain=gain,
                suggested_move=SimulationMove.swap(
                    waiver_player.player_id or waiver_player.name,
                    weakest.player_id or weakest.name,
                ),
            )
        )
    return alerts


def cold_streak_alerts(roster_players: Sequence[PlayerProjection], starters: Sequence[str]) -> List[Alert]:
    alerts: List[Alert] = []
    for player in roster_players:
        if player.trend != TREND_COLD:
            continue
        priority = "HIGH" if _is_starter(player, starters) else "MEDIUM"
        alerts.append(
            Alert(
                type=ALERT_COLD_STREAK,
                player=player.name,
                detail=f"3-week average down 15%+ vs season ({priority} priority)",
                impact="-15% projection",
            )
        )
    return alerts


def lineup_alerts(
    roster_players: Sequence[PlayerProjection],
    starter_players: Sequence[PlayerProjection],
    starter_count: int = DEFAULT_STARTER_COUNT,
) -> List[Alert]:
    current = total_projection(starter_players)
    optimal = total_projection(select_optimal_lineup(roster_players, starter_count))
    gain = optimal - current
    if gain < LINEUP_GAIN_THRESHOLD:
        return []
    return [
        Alert(
            type=ALERT_LINEUP_OPTIMIZATION,
            player="Team Lineup",
            detail=f"Current lineup {gain:.1f} points below optimal",
            impact=f"+{gain:.1f} points available",
            projected_gain=gain,
        )
    ]


def rank_alerts(alerts: Sequence[Alert]) -> List[Alert]:
    """Highest projected gain first; alerts without a gain count as zero."""

    return sorted(alerts, key=lambda alert: alert.projected_gain or 0.0, reverse=True)


def waiver_pool(
    pipeline: ProjectionPipeline,
    roster: Sequence[str],
    roster_players: Sequence[PlayerProjection],
    *,
    season: int,
    include_injuries: bool = True,
) -> List[PlayerProjection]:
    exclude = list(roster) + [player.player_id for player in roster_players if player.player_id]
    pool: List[PlayerProjection] = []
    for record in pipeline.store.top_players(season, exclude=exclude, limit=WAIVER_POOL_SIZE):
        try:
            projection = pipeline.enhance_projection(
                record.name,
                record.position,
                record.team,
                record.total_points,
                season,
                include_injuries,
                player_id=record.player_id,
            )
        except Exception as exc:
            LOGGER.warning("Omitting waiver candidate %s: %s", record.name, exc)
            continue
        pool.append(projection)
    return pool


def get_alerts(
    pipeline: ProjectionPipeline,
    week: int,
    roster: Sequence[str],
    starters: Sequence[str],
    include_injuries: bool = True,
    *,
    season: int,
    starter_count: int = DEFAULT_STARTER_COUNT,
) -> List[Alert]:
    """Run every alert check for ``week`` and return them ranked by projected gain.

    Projections are season-level, so ``week`` only labels the run today.
    """

    roster_players = project_roster(pipeline, roster, season, include_injuries)
    starter_players = [player for player in roster_players if _is_starter(player, starters)]
    pool = waiver_pool(pipeline, roster, roster_players, season=season, include_injuries=include_injuries)

    alerts: List[Alert] = []
    alerts.extend(injury_alerts(roster_players))
    alerts.extend(bad_matchup_alerts(starter_players))
    alerts.extend(waiver_alerts(starter_players, pool))
    alerts.extend(cold_streak_alerts(roster_players, starters))
    alerts.extend(lineup_alerts(roster_players, starter_players, starter_count))

    LOGGER.info("Week %s: %d alert(s) for %d rostered players", week, len(alerts), len(roster_players))
    return rank_alerts(alerts)
