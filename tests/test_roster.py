import pytest

from conftest import SEASON, weekly
from fantasy_planner.roster import project_roster, total_projection
from fantasy_planner.stats_store import StatsStore


class FlakyStore(StatsStore):
    """Fails trend lookups for one player to mimic a storage error."""

    def recent_totals(self, player_name, season, limit=10):
        if player_name == "Bad Player":
            raise RuntimeError("connection reset")
        return super().recent_totals(player_name, season, limit)


class BrokenStore(StatsStore):
    def resolve_players(self, identifiers, season):
        raise RuntimeError("database offline")


def roster_rows() -> list[dict[str, object]]:
    rows = weekly("a1", "Alpha RB", "RB", "DAL", [10, 14, 12])
    rows += weekly("b1", "Bravo WR", "WR", "NYG", [8, 9, 20])
    rows += weekly("x1", "Bad Player", "TE", "KC", [7, 7, 7])
    return rows


def test_projects_in_roster_order_and_drops_misses(make_pipeline) -> None:
    pipeline = make_pipeline(roster_rows())

    players = project_roster(pipeline, ["b1", "ghost", "Alpha RB", "b1"], SEASON)

    assert [p.player_id for p in players] == ["b1", "a1", "b1"]
    assert [p.base_projection for p in players] == [20.0, 14.0, 20.0]
    assert total_projection(players) == 54.0


def test_base_projection_is_peak_week_with_adjustments(make_pipeline) -> None:
    pipeline = make_pipeline(roster_rows(), injuries={"Alpha RB": "Q"}, sos={("DAL", "RB"): 25})

    [player] = project_roster(pipeline, ["a1"], SEASON)

    assert player.base_projection == 14.0
    assert player.final_projection == pytest.approx(14.0 * 0.85 * 0.95)
    assert player.factors.trend == "Neutral"


def test_injuries_can_be_excluded(make_pipeline) -> None:
    pipeline = make_pipeline(roster_rows(), injuries={"Alpha RB": "O"})

    [player] = project_roster(pipeline, ["a1"], SEASON, include_injuries=False)

    assert player.final_projection == 14.0


def test_store_failure_for_one_entry_is_omitted(make_pipeline) -> None:
    pipeline = make_pipeline(roster_rows(), store_cls=FlakyStore)

    players = project_roster(pipeline, ["a1", "x1", "b1"], SEASON)

    assert [p.name for p in players] == ["Alpha RB", "Bravo WR"]


def test_single_projection_propagates_store_failure(make_pipeline) -> None:
    pipeline = make_pipeline(roster_rows(), store_cls=FlakyStore)

    with pytest.raises(RuntimeError):
        pipeline.enhance_projection("Bad Player", "TE", "KC", 7.0, SEASON)


def test_batch_resolution_failure_propagates(make_pipeline) -> None:
    pipeline = make_pipeline(roster_rows(), store_cls=BrokenStore)

    with pytest.raises(RuntimeError):
        project_roster(pipeline, ["a1"], SEASON)


def test_empty_roster(make_pipeline) -> None:
    pipeline = make_pipeline(roster_rows(), store_cls=BrokenStore)

    assert project_roster(pipeline, [], SEASON) == []
