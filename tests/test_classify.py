import pytest
from hypothesis import given, strategies as st

from trafficinfo.catalog import type_by_designator
from trafficinfo.classify import (
    classify_direction, classify_pair, crosses_target_level, distance_text,
    vertical_text, describe_situation, render_solution, build_exercise,
)
from trafficinfo.models import (
    Aircraft, Direction, FlightRule, LevelChange, LevelDirection, ORIGIN, Position,
)


def _ac(cs, designator, pos, heading, speed, level, change=None, rule=FlightRule.VFR):
    return Aircraft(cs, type_by_designator(designator), rule, pos, heading, speed, level, change)


# ---------------------------------------------------------------------------
# Direction bands
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("delta, crossing, vt, vi, expected", [
    (0, 0.0, 120, 150, Direction.OVERTAKING),
    (45, 1.0, 120, 150, Direction.OVERTAKING),      # band edge, faster intruder
    (30, 1.0, 150, 120, Direction.CONVERGING),
    (30, 1.0, 120, 120, Direction.CONVERGING),      # equal speed is not overtaking
    (45, 1.0, 150, 120, Direction.CROSSING_LEFT_TO_RIGHT),
    (90, 5.0, 120, 120, Direction.CROSSING_LEFT_TO_RIGHT),
    (90, 0.0, 120, 120, Direction.CROSSING_LEFT_TO_RIGHT),
    (90, -5.0, 120, 120, Direction.CROSSING_RIGHT_TO_LEFT),
    (135, -1.0, 120, 120, Direction.CROSSING_RIGHT_TO_LEFT),
    (135.5, 1.0, 120, 120, Direction.OPPOSITE),
    (180, 0.0, 120, 300, Direction.OPPOSITE),
])
def test_classify_direction_bands(delta, crossing, vt, vi, expected):
    assert classify_direction(delta, crossing, vt, vi) is expected


@given(
    delta=st.floats(0, 180),
    crossing=st.floats(-500, 500),
    vt=st.integers(80, 600),
    vi=st.integers(80, 600),
)
def test_classify_direction_total(delta, crossing, vt, vi):
    assert isinstance(classify_direction(delta, crossing, vt, vi), Direction)


def test_classify_pair_crossing_left_to_right():
    target = _ac("PHABC", "C172", ORIGIN, 0, 120, 2500)
    intruder = _ac("G-OSKY", "P28A", Position(5.657, 5.657), 90, 150, 3500)
    assert classify_pair(target, intruder) is Direction.CROSSING_LEFT_TO_RIGHT


def test_classify_pair_overtaking():
    target = _ac("KLM1734", "E190", ORIGIN, 0, 140, 9000, rule=FlightRule.IFR)
    intruder = _ac("BAW22K", "A320", Position(0, 5), 358, 200, 10000, rule=FlightRule.IFR)
    assert classify_pair(target, intruder) is Direction.OVERTAKING


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("nm, text", [
    (1.0, "1 mile"),
    (1.4, "1 mile"),
    (1.5, "2 miles"),
    (2.0, "2 miles"),
    (7.46, "7 miles"),
    (12.5, "13 miles"),
])
def test_distance_text(nm, text):
    assert distance_text(nm) == text


@pytest.mark.parametrize("t_level, i_level, text", [
    (3500, 3500, "same altitude"),
    (3500, 3600, "same altitude"),
    (3500, 3700, "200 feet above"),
    (3500, 4500, "1000 feet above"),
    (3500, 2500, "1000 feet below"),
    (9000, 12000, "3000 feet above"),
])
def test_vertical_text_levels(t_level, i_level, text):
    target = _ac("N1AB", "C172", ORIGIN, 0, 120, t_level)
    intruder = _ac("N2CD", "C172", Position(0, 5), 180, 120, i_level)
    assert vertical_text(target, intruder) == text


def test_vertical_text_descending_through():
    target = _ac("DLH4CP", "A320", ORIGIN, 0, 200, 9000, rule=FlightRule.IFR)
    change = LevelChange(LevelDirection.DESCEND, 7000)
    intruder = _ac("UAL901", "B77W", Position(-4.5, 2.0), 30, 180, 11000, change, rule=FlightRule.IFR)
    assert vertical_text(target, intruder) == "2000 feet above, descending through your altitude"


def test_vertical_text_climbing_through():
    target = _ac("N1AB", "C172", ORIGIN, 0, 120, 3500)
    change = LevelChange(LevelDirection.CLIMB, 4500)
    intruder = _ac("N2CD", "C172", Position(0, 5), 180, 120, 2500, change)
    assert vertical_text(target, intruder) == "1000 feet below, climbing through your altitude"


def test_level_change_ending_at_target_level_is_not_through():
    change = LevelChange(LevelDirection.DESCEND, 3500)
    assert not crosses_target_level(3500, 4500, change)
    assert not crosses_target_level(3500, 4500, None)
    # moving away from the target level
    assert not crosses_target_level(3500, 4500, LevelChange(LevelDirection.CLIMB, 5500))
    assert crosses_target_level(3500, 4500, LevelChange(LevelDirection.DESCEND, 2500))
    assert crosses_target_level(3500, 2500, LevelChange(LevelDirection.CLIMB, 4500))


def test_solution_format():
    target = _ac("PHABC", "C172", ORIGIN, 0, 120, 2500)
    intruder = _ac("G-OSKY", "P28A", Position(0.0, -6.04), 10, 110, 3500)
    sit = describe_situation(target, intruder)
    assert sit.clock == 6
    assert sit.distance == 6.0
    # slower intruder on a close track
    assert sit.direction is Direction.CONVERGING
    assert render_solution(target, intruder, sit) == (
        "PHABC, traffic, 6 o'clock, 6 miles, converging, 1000 feet above, Piper PA-28"
    )


def test_heavy_suffix():
    target = _ac("DLH4CP", "A320", ORIGIN, 0, 200, 9000, rule=FlightRule.IFR)
    intruder = _ac("UAL901", "B77W", Position(-4.5, 2.0), 30, 180, 11000, rule=FlightRule.IFR)
    ex = build_exercise(target, intruder)
    assert ex.solution.endswith("Boeing 777, heavy")
    assert ex.solution.startswith("DLH4CP, traffic, 10 o'clock, 5 miles, converging, ")


def test_build_exercise_situation_matches_geometry():
    target = _ac("N1AB", "C172", ORIGIN, 90, 110, 2500)
    intruder = _ac("N2CD", "DA40", Position(5.5, -5.0), 0, 100, 3000)
    ex = build_exercise(target, intruder)
    assert ex.situation.direction is Direction.CROSSING_RIGHT_TO_LEFT
    assert ex.situation.clock == 1
    assert ex.situation.distance == 7.4
    assert ex.situation.vertical_text == "500 feet above"
    assert ex.solution == (
        "N1AB, traffic, 1 o'clock, 7 miles, crossing right to left, 500 feet above, Diamond DA40"
    )
