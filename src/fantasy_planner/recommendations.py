"""Start/sit recommendations and waiver-wire rankings from weekly history."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .adjustments import ProjectionPipeline

LOGGER = logging.getLogger(__name__)

START = "START"
SIT = "SIT"
FLEX = "FLEX"

RECOMMENDATION_LOOKBACK_WEEKS = 5
RECENT_WEEKS = 3
RECENT_WEIGHT = 0.6
SEASON_WEIGHT = 0.4
NEUTRAL_OPPONENT_RANK = 16
OPPONENT_RANK_SCALE = 0.3
LEAGUE_TEAMS = 32

START_THRESHOLDS = {"QB": 18, "RB": 12, "WR": 10, "TE": 8, "K": 7, "DEF": 7}
SIT_THRESHOLDS = {"QB": 12, "RB": 8, "WR": 6, "TE": 5, "K": 4, "DEF": 4}
WAIVER_THRESHOLDS = {"QB": 15, "RB": 10, "WR": 8, "TE": 6, "K": 5, "DEF": 5}

ROS_RECENT_WEIGHT = 0.7
ROS_SEASON_WEIGHT = 0.3
BREAKOUT_RATIO = 1.25
HOT_RATIO = 1.2
DECLINE_RATIO = 0.8


@dataclass
class Recommendation:
    name: str
    position: str
    team: str
    season_avg: float
    recent_avg: float
    weighted_avg: float
    opponent_rank: int
    projected_points: float
    recommendation: str
    reason: str
    injury_status: Optional[str] = None
    sos_score: Optional[str] = None
    trend: Optional[str] = None
    enhanced_projection: Optional[float] = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass
class WaiverTarget:
    name: str
    position: str
    team: str
    avg_points: float
    ros_projection: float
    breakout_flag: bool
    recent_trend: str
    pickup_priority: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def opponent_description(rank: int) -> str:
    if rank <= 8:
        return "tough defense"
    if rank <= 16:
        return "above-average defense"
    if rank <= 24:
        return "average defense"
    return "favorable matchup"


def _group_points(rows: pd.DataFrame) -> Dict[str, dict]:
    players: Dict[str, dict] = {}
    for row in rows.itertuples(index=False):
        entry = players.setdefault(
            row.name,
            {
                "name": row.name,
                "position": "" if pd.isna(row.position) else row.position,
                "team": "FA" if pd.isna(row.team) else row.team,
                "weeks": [],
                "points": [],
            },
        )
        entry["weeks"].append(int(row.week))
        entry["points"].append(0.0 if pd.isna(row.total_points) else float(row.total_points))
    return players


def _classify_start_sit(position: str, projected: float, rank: int) -> tuple[str, str]:
    if projected >= START_THRESHOLDS.get(position, 10):
        return START, f"Strong projection ({projected:.1f} pts) vs {opponent_description(rank)}"
    if projected <= SIT_THRESHOLDS.get(position, 6):
        return SIT, f"Low projection ({projected:.1f} pts) vs {opponent_description(rank)}"
    return FLEX, f"Moderate projection ({projected:.1f} pts) - consider as flex option"


def get_recommendations(
    pipeline: ProjectionPipeline,
    week: int,
    position: Optional[str] = None,
    limit: int = 50,
    roster: Optional[Sequence[str]] = None,
    include_injuries: bool = True,
    *,
    season: int,
) -> dict[str, object]:
    """Rank start/sit calls for ``week`` using the prior five weeks of scoring.

    The opponent rank comes from the static schedule-strength table; players
    without an entry get a neutral rank.
    """

    rows = pipeline.store.weekly_rows(
        season,
        start_week=max(1, week - RECOMMENDATION_LOOKBACK_WEEKS),
        end_week=week,
        position=position,
    )
    rows = rows.loc[rows["week"].notna()]
    roster_names = set(roster or [])

    recommendations: List[Recommendation] = []
    for player in _group_points(rows).values():
        if roster_names and player["name"] not in roster_names:
            continue

        season_avg = _mean(player["points"])
        recent = [pts for wk, pts in zip(player["weeks"], player["points"]) if wk >= week - RECENT_WEEKS]
        recent_avg = _mean(recent) if recent else season_avg
        weighted_avg = recent_avg * RECENT_WEIGHT + season_avg * SEASON_WEIGHT

        rank = pipeline.reference.sos_rank(player["team"], player["position"]) or NEUTRAL_OPPONENT_RANK
        projected = weighted_avg + (LEAGUE_TEAMS - rank) * OPPONENT_RANK_SCALE
        call, reason = _classify_start_sit(player["position"], projected, rank)

        recommendations.append(
            Recommendation(
                name=player["name"],
                position=player["position"],
                team=player["team"],
                season_avg=season_avg,
                recent_avg=recent_avg,
                weighted_avg=weighted_avg,
                opponent_rank=rank,
                projected_points=projected,
                recommendation=call,
                reason=reason,
            )
        )

    recommendations.sort(key=lambda item: item.projected_points, reverse=True)
    selected = recommendations[:limit]

    if include_injuries:
        for item in selected:
            enhanced = pipeline.enhance_projection(
                item.name, item.position, item.team, item.projected_points, season, include_injuries
            )
            item.injury_status = enhanced.injury_status
            item.sos_score = enhanced.sos_label
            item.trend = enhanced.trend
            item.enhanced_projection = enhanced.final_projection

    LOGGER.info("Week %s start/sit: %d candidate(s)", week, len(recommendations))
    return {
        "results": selected,
        "total_count": len(recommendations),
        "week": week,
        "position": position or "ALL",
    }


def _pickup_priority(position: str, ros_projection: float, breakout: bool) -> str:
    threshold = WAIVER_THRESHOLDS.get(position, 6)
    if breakout and ros_projection > threshold:
        return "HIGH"
    if ros_projection > threshold * 0.8:
        return "MEDIUM"
    return "LOW"


def get_waivers(
    pipeline: ProjectionPipeline,
    week: int,
    position: Optional[str] = None,
    limit: int = 50,
    roster: Optional[Sequence[str]] = None,
    *,
    season: int,
) -> dict[str, object]:
    """Rank unrostered players by a recency-weighted rest-of-season projection."""

    rows = pipeline.store.weekly_rows(season, position=position)
    rows = rows.loc[rows["week"].notna()]
    roster_names = set(roster or [])

    targets: List[WaiverTarget] = []
    for player in _group_points(rows).values():
        points = player["points"]
        if not points or player["name"] in roster_names:
            continue

        avg_points = _mean(points)
        recent_avg = _mean(points[-RECENT_WEEKS:])
        ros_projection = recent_avg * ROS_RECENT_WEIGHT + avg_points * ROS_SEASON_WEIGHT

        last_two_avg = _mean(points[-2:])
        breakout = last_two_avg > avg_points * BREAKOUT_RATIO
        if last_two_avg > avg_points * HOT_RATIO:
            trend = "Hot streak"
        elif last_two_avg < avg_points * DECLINE_RATIO:
            trend = "Declining"
        else:
            trend = "Stable"

        targets.append(
            WaiverTarget(
                name=player["name"],
                position=player["position"],
                team=player["team"],
                avg_points=avg_points,
                ros_projection=ros_projection,
                breakout_flag=breakout,
                recent_trend=trend,
                pickup_priority=_pickup_priority(player["position"], ros_projection, breakout),
            )
        )

    targets.sort(key=lambda item: item.ros_projection, reverse=True)
    LOGGER.info("Week %s waivers: %d candidate(s)", week, len(targets))
    return {
        "results": targets[:limit],
        "total_count": len(targets),
        "week": week,
        "position": position or "ALL",
    }
