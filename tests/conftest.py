from typing import Callable, Optional

import pandas as pd
import pytest

from fantasy_planner.adjustments import AdjustmentFactors, PlayerProjection, ProjectionPipeline
from fantasy_planner.reference import ReferenceData
from fantasy_planner.settings import reset_settings_cache
from fantasy_planner.stats_store import STAT_COLUMNS, StatsStore

SEASON = 2024


def weekly(
    player_id: str,
    name: str,
    position: str,
    team: str,
    points: list[float],
    season: int = SEASON,
    start_week: int = 1,
) -> list[dict[str, object]]:
    return [
        {
            "player_id": player_id,
            "name": name,
            "position": position,
            "team": team,
            "season": season,
            "week": start_week + offset,
            "total_points": value,
        }
        for offset, value in enumerate(points)
    ]


@pytest.fixture()
def make_pipeline() -> Callable[..., ProjectionPipeline]:
    def _make(
        rows: list[dict[str, object]],
        injuries: Optional[dict[str, str]] = None,
        sos: Optional[dict[tuple[str, str], int]] = None,
        store_cls: type = StatsStore,
    ) -> ProjectionPipeline:
        store = store_cls(pd.DataFrame(rows, columns=STAT_COLUMNS))
        reference = ReferenceData(injuries=injuries or {}, sos_ranks=sos or {})
        return ProjectionPipeline(store, reference)

    return _make


@pytest.fixture()
def make_projection() -> Callable[..., PlayerProjection]:
    def _make(
        name: str,
        points: float,
        *,
        position: str = "WR",
        team: str = "KC",
        player_id: Optional[str] = None,
        injury_status: Optional[str] = None,
        sos_label: str = "Medium",
        trend: str = "Neutral",
    ) -> PlayerProjection:
        return PlayerProjection(
            player_id=player_id or name.lower().replace(" ", "-"),
            name=name,
            position=position,
            team=team,
            base_projection=points,
            factors=AdjustmentFactors(
                injury_status=injury_status,
                injury_multiplier=1.0,
                sos_label=sos_label,
                sos_adjustment=0.0,
                trend=trend,
            ),
            final_projection=points,
        )

    return _make


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()
