"""Season and draft rankings aggregated from weekly scoring rows."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import List, Optional

import pandas as pd

from .stats_store import FREE_AGENT_TEAM, StatsStore

LOGGER = logging.getLogger(__name__)

# Rough weekly scoring baselines used for boom/bust classification.
POSITION_AVERAGES = {"QB": 20.0, "RB": 15.0, "WR": 12.0, "TE": 10.0, "K": 8.0, "DEF": 8.0}
DEFAULT_POSITION_AVERAGE = 10.0
BOOM_RATIO = 1.2
BUST_RATIO = 0.8
TIER_GAP = 10.0


@dataclass
class PlayerRanking:
    player_id: str
    name: str
    position: str
    team: str
    total_points: float
    games_played: int
    avg_points: float

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass
class DraftRanking:
    player_id: str
    name: str
    position: str
    team: str
    total_points: float
    avg_points: float
    consistency_score: float
    boom_rate: float
    bust_rate: float
    tier: int = 0

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def _check_page(limit: int, offset: int) -> None:
    if limit < 0 or offset < 0:
        raise ValueError("limit and offset must be >= 0")


def _text(value: object, default: str = "") -> str:
    return default if pd.isna(value) else str(value)


def get_rankings(
    store: StatsStore,
    season: Optional[int],
    week: Optional[int] = None,
    position: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> dict[str, object]:
    """Total points per player for a season, or a single week when ``week`` is given."""

    _check_page(limit, offset)
    rows = store.weekly_rows(
        season,
        start_week=week,
        end_week=week + 1 if week is not None else None,
        position=position,
    )
    rows = rows.loc[rows["player_id"].notna()]

    grouped = rows.groupby("player_id", sort=False).agg(
        name=("name", "first"),
        position=("position", "first"),
        team=("team", "first"),
        total_points=("total_points", "sum"),
        games_played=("week", "nunique"),
    )
    grouped = grouped.sort_values("total_points", ascending=False, kind="mergesort")

    rankings: List[PlayerRanking] = []
    for player_id, row in grouped.iloc[offset : offset + limit].iterrows():
        games = int(row["games_played"])
        total = float(row["total_points"])
        rankings.append(
            PlayerRanking(
                player_id=str(player_id),
                name=_text(row["name"]),
                position=_text(row["position"]),
                team=_text(row["team"], FREE_AGENT_TEAM),
                total_points=total,
                games_played=games,
                avg_points=total / games if games else 0.0,
            )
        )

    if grouped.empty:
        LOGGER.warning("No rankings found for season=%s week=%s position=%s", season, week, position)
    return {"results": rankings, "total_count": len(grouped)}


def _draft_metrics(player_id: str, frame: pd.DataFrame) -> DraftRanking:
    points = frame["total_points"].fillna(0.0).astype(float)
    first = frame.iloc[0]
    position = _text(first["position"])

    mean = float(points.mean())
    std = float(points.std(ddof=0))
    consistency = max(0.0, 1 - std / mean) if mean > 0 else 0.0

    baseline = POSITION_AVERAGES.get(position, DEFAULT_POSITION_AVERAGE)
    return DraftRanking(
        player_id=str(player_id),
        name=_text(first["name"]),
        position=position,
        team=_text(first["team"], FREE_AGENT_TEAM),
        total_points=float(points.sum()),
        avg_points=mean,
        consistency_score=consistency,
        boom_rate=float((points >= baseline * BOOM_RATIO).mean() * 100),
        bust_rate=float((points <= baseline * BUST_RATIO).mean() * 100),
    )


def assign_tiers(players: List[DraftRanking]) -> None:
    """Tier players already sorted by total points; a drop of more than 10 points starts a new tier."""

    tier = 1
    anchor = players[0].total_points if players else 0.0
    for player in players:
        if anchor - player.total_points > TIER_GAP:
            tier += 1
            anchor = player.total_points
        player.tier = tier


def get_draft_rankings(
    store: StatsStore,
    season: Optional[int],
    position: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> dict[str, object]:
    """Season totals with consistency, boom/bust rates and point tiers for draft prep."""

    _check_page(limit, offset)
    rows = store.weekly_rows(season, position=position)
    rows = rows.loc[rows["player_id"].notna()]

    players = [_draft_metrics(player_id, frame) for player_id, frame in rows.groupby("player_id", sort=False)]
    players.sort(key=lambda player: player.total_points, reverse=True)
    assign_tiers(players)

    LOGGER.info("Draft rankings: %d player(s) for season %s", len(players), season)
    return {"results": players[offset : offset + limit], "total_count": len(players)}
