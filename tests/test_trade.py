import pytest

from conftest import SEASON, weekly
from fantasy_planner.reference import ReferenceData
from fantasy_planner.trade import analyze_trade, build_proposed_roster, player_weekly_projection

PLAYOFF_WEEKS = [15, 16, 17]


@pytest.fixture()
def pipeline(make_pipeline):
    rows = weekly("a1", "Alpha RB", "RB", "DAL", [10, 12, 14])
    rows += weekly("b1", "Bravo WR", "WR", "NYG", [8, 9, 20])
    rows += weekly("c1", "Charlie QB", "QB", "KC", [22, 18, 25])
    rows += weekly("w1", "Waiver WR", "WR", "MIA", [15, 5, 6])
    sos = {("DAL", "RB"): 5, ("NYG", "WR"): 25, ("KC", "QB"): 30}
    return make_pipeline(rows, sos=sos)


def test_two_for_one_trade(pipeline) -> None:
    result = analyze_trade(pipeline, ["a1", "b1"], ["b1"], ["c1", "w1"], PLAYOFF_WEEKS, season=SEASON)

    # Weekly values: a1 14.7 * 1.05, b1 19 * 0.95, c1 23.75 * 0.90, w1 15.
    current_week = 14.7 * 1.05 + 19.0 * 0.95
    proposed_week = 14.7 * 1.05 + 23.75 * 0.90 + 15.0

    assert len(result.weekly_breakdown) == 18
    week_one = result.weekly_breakdown[0]
    assert week_one.current_projection == pytest.approx(current_week)
    assert week_one.proposed_projection == pytest.approx(proposed_week)
    assert not week_one.is_playoff_week
    assert result.weekly_breakdown[15].current_projection == pytest.approx(current_week * 1.02)

    assert result.current_ros_total == pytest.approx(sum(row.current_projection for row in result.weekly_breakdown))
    assert result.proposed_ros_total == pytest.approx(sum(row.proposed_projection for row in result.weekly_breakdown))
    assert result.net_change == pytest.approx((proposed_week - current_week) * (15 + 3 * 1.02))

    assert [item.week for item in result.impact_weeks][:3] == [15, 16, 17]
    assert len(result.impact_weeks) == 18
    assert result.impact_weeks[0].reason == "Playoff week boost"
    assert result.impact_weeks[-1].reason == "Improved matchup"

    assert result.playoff_impact.playoff_weeks_affected == [15, 16, 17]
    assert result.playoff_impact.playoff_change == pytest.approx((proposed_week - current_week) * 3 * 1.02)


def test_depth_analysis_uses_current_positions(pipeline) -> None:
    result = analyze_trade(pipeline, ["a1", "b1"], ["b1"], ["c1", "w1"], PLAYOFF_WEEKS, season=SEASON)

    depth = result.depth_analysis
    assert set(depth.position_impact) == {"RB", "WR"}
    assert depth.position_impact["RB"] == pytest.approx(0.0)
    assert depth.position_impact["WR"] == pytest.approx(-4.0)
    assert depth.starter_impact == pytest.approx(19.75)
    assert depth.bench_impact == pytest.approx(0.0)


def test_depth_split_with_one_starter(pipeline) -> None:
    result = analyze_trade(
        pipeline, ["a1", "b1"], ["b1"], ["c1", "w1"], PLAYOFF_WEEKS, season=SEASON, starter_count=1
    )

    assert result.depth_analysis.starter_impact == pytest.approx(0.0)
    assert result.depth_analysis.bench_impact == pytest.approx(19.75)


def test_giving_away_value_flags_concerns(pipeline) -> None:
    result = analyze_trade(pipeline, ["a1", "c1"], ["c1"], [], PLAYOFF_WEEKS, season=SEASON)

    assert result.net_change < 0
    assert result.impact_weeks[0].reason == "Playoff week concern"
    assert result.impact_weeks[-1].reason == "Tougher matchup"
    assert result.depth_analysis.position_impact == {"RB": 0.0, "QB": pytest.approx(-23.75)}


def test_even_trade_has_no_impact_weeks(pipeline) -> None:
    result = analyze_trade(pipeline, ["a1", "b1"], ["b1"], ["b1"], PLAYOFF_WEEKS, season=SEASON)

    assert result.net_change == pytest.approx(0.0)
    assert result.impact_weeks == []
    assert result.playoff_impact.playoff_weeks_affected == []


def test_player_weekly_projection_layers(make_projection) -> None:
    reference = ReferenceData(sos_ranks={("NYG", "WR"): 25})
    player = make_projection("Hurt WR", 10.0, team="NYG", injury_status="Q")

    assert player_weekly_projection(reference, player, 16, PLAYOFF_WEEKS) == pytest.approx(10 * 0.95 * 1.02 * 0.85)
    assert player_weekly_projection(reference, player, 3, PLAYOFF_WEEKS) == pytest.approx(10 * 0.95 * 0.85)
    assert player_weekly_projection(reference, player, 16, PLAYOFF_WEEKS, include_injuries=False) == pytest.approx(
        10 * 0.95 * 1.02
    )


def test_build_proposed_roster() -> None:
    assert build_proposed_roster(["a", "b", "a"], ["a", "zz"], ["b", "c"]) == ["b", "a", "c"]
