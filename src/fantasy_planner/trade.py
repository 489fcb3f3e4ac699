"""Rest-of-season trade evaluation over weekly projection series."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Sequence

from .adjustments import PlayerProjection, ProjectionPipeline
from .reference import (
    DEFAULT_STARTER_COUNT,
    SOS_EASY,
    SOS_HARD,
    SOS_VERY_HARD,
    ReferenceData,
)
from .roster import project_roster

LOGGER = logging.getLogger(__name__)

SEASON_WEEKS = range(1, 19)
IMPACT_WEEK_THRESHOLD = 5.0
PLAYOFF_AFFECTED_THRESHOLD = 2.0
PLAYOFF_IMPORTANCE_BOOST = 1.02

WEEKLY_SOS_FACTORS = {
    SOS_EASY: 1.05,
    SOS_HARD: 0.95,
    SOS_VERY_HARD: 0.90,
}


@dataclass(frozen=True)
class WeeklyProjectionPoint:
    week: int
    projection: float


@dataclass
class WeeklyBreakdown:
    week: int
    current_projection: float
    proposed_projection: float
    difference: float
    is_playoff_week: bool


@dataclass
class ImpactWeek:
    week: int
    change: float
    reason: str
    is_playoff_week: bool


@dataclass
class PlayoffImpact:
    current_playoff_total: float
    proposed_playoff_total: float
    playoff_change: float
    playoff_weeks_affected: List[int] = field(default_factory=list)


@dataclass
class DepthAnalysis:
    position_impact: Dict[str, float]
    starter_impact: float
    bench_impact: float


@dataclass
class TradeAnalysis:
    current_ros_total: float
    proposed_ros_total: float
    net_change: float
    weekly_breakdown: List[WeeklyBreakdown]
    impact_weeks: List[ImpactWeek]
    playoff_impact: PlayoffImpact
    depth_analysis: DepthAnalysis

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def build_proposed_roster(roster: Sequence[str], give: Iterable[str], receive: Iterable[str]) -> List[str]:
    proposed = list(roster)
    for player_id in give:
        if player_id in proposed:
            proposed.remove(player_id)
    for player_id in receive:
        if player_id not in proposed:
            proposed.append(player_id)
    return proposed


def player_weekly_projection(
    reference: ReferenceData,
    player: PlayerProjection,
    week: int,
    playoff_weeks: Sequence[int],
    include_injuries: bool = True,
) -> float:
    """Weekly value layered on top of the already adjusted projection."""

    projection = player.final_projection

    label = reference.weekly_sos_label(player.team, player.position, week)
    projection *= WEEKLY_SOS_FACTORS.get(label, 1.0)

    if week in playoff_weeks:
        projection *= PLAYOFF_IMPORTANCE_BOOST

    if include_injuries and player.injury_status:
        projection *= reference.injury_multiplier(player.injury_status)

    return projection


def weekly_projection_series(
    reference: ReferenceData,
    players: Sequence[PlayerProjection],
    playoff_weeks: Sequence[int],
    include_injuries: bool = True,
) -> List[WeeklyProjectionPoint]:
    series: List[WeeklyProjectionPoint] = []
    for week in SEASON_WEEKS:
        total = sum(
            player_weekly_projection(reference, player, week, playoff_weeks, include_injuries)
            for player in players
        )
        series.append(WeeklyProjectionPoint(week=week, projection=total))
    return series


def _impact_reason(difference: float, is_playoff_week: bool) -> str:
    if difference > 0:
        return "Playoff week boost" if is_playoff_week else "Improved matchup"
    return "Playoff week concern" if is_playoff_week else "Tougher matchup"


def _playoff_impact(breakdown: Sequence[WeeklyBreakdown]) -> PlayoffImpact:
    playoff_rows = [row for row in breakdown if row.is_playoff_week]
    current_total = sum(row.current_projection for row in playoff_rows)
    proposed_total = sum(row.proposed_projection for row in playoff_rows)
    return PlayoffImpact(
        current_playoff_total=current_total,
        proposed_playoff_total=proposed_total,
        playoff_change=proposed_total - current_total,
        playoff_weeks_affected=[
            row.week for row in playoff_rows if abs(row.difference) >= PLAYOFF_AFFECTED_THRESHOLD
        ],
    )


def _depth_analysis(
    current: Sequence[PlayerProjection],
    proposed: Sequence[PlayerProjection],
    starter_count: int,
) -> DepthAnalysis:
    current_by_position: Dict[str, float] = defaultdict(float)
    proposed_by_position: Dict[str, float] = defaultdict(float)
    for player in current:
        current_by_position[player.position] += player.final_projection
    for player in proposed:
        proposed_by_position[player.position] += player.final_projection

    # Positions are taken from the current roster only.
    position_impact = {
        position: proposed_by_position.get(position, 0.0) - total
        for position, total in current_by_position.items()
    }

    starter_impact = sum(p.final_projection for p in proposed[:starter_count]) - sum(
        p.final_projection for p in current[:starter_count]
    )
    total_impact = sum(p.final_projection for p in proposed) - sum(p.final_projection for p in current)

    return DepthAnalysis(
        position_impact=position_impact,
        starter_impact=starter_impact,
        bench_impact=total_impact - starter_impact,
    )


def analyze_trade(
    pipeline: ProjectionPipeline,
    roster: Sequence[str],
    give: Sequence[str],
    receive: Sequence[str],
    playoff_weeks: Sequence[int],
    include_injuries: bool = True,
    *,
    season: int,
    starter_count: int = DEFAULT_STARTER_COUNT,
) -> TradeAnalysis:
    reference = pipeline.reference
    playoff_set = sorted(set(playoff_weeks))

    current_players = project_roster(pipeline, roster, season, include_injuries)
    current_series = weekly_projection_series(reference, current_players, playoff_set, include_injuries)

    proposed_roster = build_proposed_roster(roster, give, receive)
    proposed_players = project_roster(pipeline, proposed_roster, season, include_injuries)
    proposed_series = weekly_projection_series(reference, proposed_players, playoff_set, include_injuries)

    breakdown = [
        WeeklyBreakdown(
            week=current.week,
            current_projection=current.projection,
            proposed_projection=proposed.projection,
            difference=proposed.projection - current.projection,
            is_playoff_week=current.week in playoff_set,
        )
        for current, proposed in zip(current_series, proposed_series)
    ]

    impact_weeks = sorted(
        (
            ImpactWeek(
                week=row.week,
                change=row.difference,
                reason=_impact_reason(row.difference, row.is_playoff_week),
                is_playoff_week=row.is_playoff_week,
            )
            for row in breakdown
            if abs(row.difference) >= IMPACT_WEEK_THRESHOLD
        ),
        key=lambda item: abs(item.change),
        reverse=True,
    )

    current_total = sum(point.projection for point in current_series)
    proposed_total = sum(point.projection for point in proposed_series)

    LOGGER.info(
        "Trade give=%s receive=%s: ROS %.2f -> %.2f", list(give), list(receive), current_total, proposed_total
    )

    return TradeAnalysis(
        current_ros_total=current_total,
        proposed_ros_total=proposed_total,
        net_change=proposed_total - current_total,
        weekly_breakdown=breakdown,
        impact_weeks=impact_weeks,
        playoff_impact=_playoff_impact(breakdown),
        depth_analysis=_depth_analysis(current_players, proposed_players, starter_count),
    )
