"""Multi-factor adjustment of a player's base projection."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from .reference import ReferenceData
from .stats_store import StatsStore

LOGGER = logging.getLogger(__name__)

TREND_HOT = "Hot"
TREND_COLD = "Cold"
TREND_NEUTRAL = "Neutral"

TREND_HOT_THRESHOLD = 0.15
TREND_COLD_THRESHOLD = -0.15
TREND_LOOKBACK_WEEKS = 10
TREND_RECENT_WEEKS = 3


def classify_trend(points: Sequence[float]) -> str:
    """Label recent form from weekly totals ordered newest first."""

    if len(points) < TREND_RECENT_WEEKS:
        return TREND_NEUTRAL

    season_avg = sum(points) / len(points)
    recent = points[:TREND_RECENT_WEEKS]
    recent_avg = sum(recent) / len(recent)

    if season_avg == 0:
        return TREND_NEUTRAL

    delta = (recent_avg - season_avg) / season_avg
    if delta >= TREND_HOT_THRESHOLD:
        return TREND_HOT
    if delta <= TREND_COLD_THRESHOLD:
        return TREND_COLD
    return TREND_NEUTRAL


@dataclass(frozen=True)
class AdjustmentFactors:
    injury_status: Optional[str]
    injury_multiplier: float
    sos_label: str
    sos_adjustment: float
    trend: str


@dataclass(frozen=True)
class PlayerProjection:
    player_id: Optional[str]
    name: str
    position: str
    team: str
    base_projection: float
    factors: AdjustmentFactors
    final_projection: float

    @property
    def injury_status(self) -> Optional[str]:
        return self.factors.injury_status

    @property
    def sos_label(self) -> str:
        return self.factors.sos_label

    @property
    def trend(self) -> str:
        return self.factors.trend

    def matches(self, identifier: str) -> bool:
        return identifier == self.player_id or identifier == self.name

    def to_dict(self) -> dict[str, object]:
        payload = asdict(self)
        factors = payload.pop("factors")
        payload.update(factors)
        return payload


class ProjectionPipeline:
    """Applies injury, schedule-strength and trend factors to base projections.

    Reference tables are injected so tests can swap in fixture data; the stats
    store is only queried for the trend history.
    """

    def __init__(self, store: StatsStore, reference: Optional[ReferenceData] = None) -> None:
        self.store = store
        self.reference = reference or ReferenceData.default()

    def calculate_trend(self, player_name: str, season: int) -> str:
        points = self.store.recent_totals(player_name, season, limit=TREND_LOOKBACK_WEEKS)
        return classify_trend(points)

    def enhance_projection(
        self,
        player_name: str,
        position: str,
        team: str,
        base_projection: float,
        season: int,
        include_injuries: bool = True,
        *,
        player_id: Optional[str] = None,
    ) -> PlayerProjection:
        final_projection = float(base_projection)

        injury_status: Optional[str] = None
        injury_multiplier = 1.0
        if include_injuries:
            injury_status = self.reference.injury_status(player_name)
            if injury_status:
                injury_multiplier = self.reference.injury_multiplier(injury_status)
                final_projection *= injury_multiplier

        sos = self.reference.sos_score(team, position)
        final_projection *= 1 + sos.adjustment

        trend = self.calculate_trend(player_name, season)

        LOGGER.debug(
            "%s (%s %s): base=%.2f injury=%s x%.2f sos=%s %+.2f trend=%s -> %.2f",
            player_name,
            team,
            position,
            base_projection,
            injury_status or "-",
            injury_multiplier,
            sos.label,
            sos.adjustment,
            trend,
            final_projection,
        )

        return PlayerProjection(
            player_id=player_id,
            name=player_name,
            position=position,
            team=team,
            base_projection=float(base_projection),
            factors=AdjustmentFactors(
                injury_status=injury_status,
                injury_multiplier=injury_multiplier,
                sos_label=sos.label,
                sos_adjustment=sos.adjustment,
                trend=trend,
            ),
            final_projection=final_projection,
        )
