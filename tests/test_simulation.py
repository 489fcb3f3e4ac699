import pytest

from conftest import SEASON, weekly
from fantasy_planner.simulation import SimulationMove, apply_moves, simulate


@pytest.fixture()
def pipeline(make_pipeline):
    rows = weekly("a1", "Alpha RB", "RB", "DAL", [10, 12, 14])
    rows += weekly("b1", "Bravo WR", "WR", "NYG", [8, 9, 20])
    rows += weekly("c1", "Charlie QB", "QB", "KC", [22, 18, 25])
    rows += weekly("w1", "Waiver WR", "WR", "MIA", [15, 5, 6])
    return make_pipeline(rows)


@pytest.mark.parametrize("mode", ["draft", "lineup", "waiver"])
def test_empty_moves_are_a_no_op(pipeline, mode: str) -> None:
    result = simulate(pipeline, mode, ["a1", "b1", "c1"], [], season=SEASON)

    assert result.baseline_projection == 59.0
    assert result.difference == 0
    assert all(impact.change == 0 for impact in result.player_impacts)
    assert result.slot_warnings is None


def test_draft_add_then_remove_restores_total(pipeline) -> None:
    moves = [SimulationMove.add("c1"), SimulationMove.remove("c1")]

    result = simulate(pipeline, "draft", ["a1", "b1"], moves, season=SEASON)

    assert result.new_projection == result.baseline_projection
    assert result.new_roster == ["a1", "b1"]


@pytest.mark.parametrize("mode", ["lineup", "waiver"])
def test_add_is_ignored_outside_draft(pipeline, mode: str) -> None:
    result = simulate(pipeline, mode, ["a1"], [SimulationMove.add("c1")], season=SEASON)

    assert result.new_roster == ["a1"]
    assert result.difference == 0
    assert [impact.player_id for impact in result.player_impacts] == ["a1"]


def test_draft_add_reports_new_player_and_slot_warning(pipeline) -> None:
    result = simulate(
        pipeline,
        "draft",
        ["a1", "b1"],
        [SimulationMove.add("c1", target_slot="QB")],
        {"QB": 1, "RB": 2},
        season=SEASON,
    )

    assert result.difference == 25.0
    assert result.slot_warnings == ["+2 over slot limit for QB"]
    added = [impact for impact in result.player_impacts if impact.player_id == "c1"]
    assert added[0].change == 25.0


def test_draft_add_without_slot_limits_has_no_warnings(pipeline) -> None:
    result = simulate(pipeline, "draft", ["a1"], [SimulationMove.add("c1", target_slot="QB")], season=SEASON)

    assert result.slot_warnings is None


def test_waiver_swap_drops_and_adds(pipeline) -> None:
    result = simulate(pipeline, "waiver", ["a1", "b1"], [SimulationMove.swap("w1", "b1")], season=SEASON)

    assert result.new_roster == ["a1", "w1"]
    assert result.new_projection == 29.0
    assert result.difference == -5.0

    impacts = {impact.player_id: impact for impact in result.player_impacts}
    assert impacts["a1"].change == 0
    assert impacts["w1"].change == 15.0
    assert impacts["b1"].projection == 0
    assert impacts["b1"].change == -20.0


def test_lineup_swap_and_optimal_lineup(pipeline) -> None:
    result = simulate(
        pipeline,
        "lineup",
        ["a1", "b1", "w1"],
        [SimulationMove.swap("a1", "b1")],
        season=SEASON,
        starter_count=2,
    )

    assert result.new_roster == ["b1", "a1", "w1"]
    assert result.difference == 0
    assert [p.player_id for p in result.optimal_lineup] == ["b1", "w1"]
    assert result.optimal_projection == 35.0


def test_lineup_swap_ignores_unknown_players(pipeline) -> None:
    assert apply_moves("lineup", ["a1", "b1"], [SimulationMove.swap("a1", "zz")]) == ["a1", "b1"]


def test_remove_applies_in_every_mode_and_by_name(pipeline) -> None:
    result = simulate(pipeline, "lineup", ["Alpha RB", "b1"], [SimulationMove.remove("Alpha RB")], season=SEASON)

    assert result.new_projection == 20.0
    removed = [impact for impact in result.player_impacts if impact.player_name == "Alpha RB"]
    assert removed[0].projection == 0
    assert removed[0].change == -14.0


def test_moves_apply_in_order() -> None:
    moves = [SimulationMove.add("x"), SimulationMove.swap("y", "x"), SimulationMove.add("x")]

    assert apply_moves("waiver", ["a"], moves) == ["a", "y"]
    assert apply_moves("draft", ["a"], moves) == ["a", "x", "x"]


def test_unknown_mode(pipeline) -> None:
    with pytest.raises(ValueError):
        simulate(pipeline, "keeper", ["a1"], [], season=SEASON)


def test_move_parsing_and_validation() -> None:
    assert SimulationMove.parse("add:c1:QB") == SimulationMove.add("c1", "QB")
    assert SimulationMove.parse("remove:a1") == SimulationMove.remove("a1")
    assert SimulationMove.parse("SWAP: w1 : b1") == SimulationMove.swap("w1", "b1")
    assert SimulationMove.from_dict({"action": "add", "player_name": "Waiver WR"}).player_id == "Waiver WR"

    with pytest.raises(ValueError):
        SimulationMove.parse("swap:w1")
    with pytest.raises(ValueError):
        SimulationMove.parse("trade:w1")
    with pytest.raises(ValueError):
        SimulationMove("swap", "w1")


def test_result_serializes(pipeline) -> None:
    payload = simulate(pipeline, "waiver", ["a1"], [SimulationMove.swap("w1", "a1")], season=SEASON).to_dict()

    assert payload["difference"] == 1.0
    assert {impact["player_id"] for impact in payload["player_impacts"]} == {"a1", "w1"}
