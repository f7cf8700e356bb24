from dataclasses import replace

import pytest
from hypothesis import given, settings, strategies as st

import config
from sim.scenarios import SCENARIOS, converging_descending_heavy, crossing_left_to_right
from trafficinfo.models import Direction, FlightRule, LevelChange, LevelDirection, Position, Situation
from trafficinfo.monitor import (
    ExerciseMonitor, check_consistency, check_convergence, check_flight_rules,
    check_level_change, check_realism, validate_exercise,
)


def test_valid_exercise_has_no_problems():
    ex = converging_descending_heavy()
    assert validate_exercise(ex) == []


def test_diverging_pair_fails_convergence():
    ex = crossing_left_to_right()
    problems = check_convergence(ex.target, ex.intruder)
    assert any("diverging" in p for p in problems)
    assert any("not closing" in p for p in problems)


def test_realism_flags_speed_level_and_distance():
    ex = converging_descending_heavy()
    fast = replace(ex.intruder, speed=700)
    assert any("speed" in p for p in check_realism(ex.target, fast))

    high = replace(ex.intruder, level=50000, level_change=None)
    assert any("level" in p for p in check_realism(ex.target, high))

    far = replace(ex.intruder, position=Position(20.0, 0.0))
    assert any("distance" in p for p in check_realism(ex.target, far))

    near = replace(ex.intruder, position=Position(1.0, 0.0))
    assert any("distance" in p for p in check_realism(ex.target, near))


def test_mixed_flight_rules_flagged():
    ex = converging_descending_heavy()
    vfr = replace(ex.intruder, flight_rule=FlightRule.VFR)
    assert check_flight_rules(ex.target, vfr)
    assert check_flight_rules(ex.target, ex.intruder) == []


def test_level_change_must_cross_through():
    ex = converging_descending_heavy()
    to_target = replace(ex.intruder, level_change=LevelChange(LevelDirection.DESCEND, ex.target.level))
    assert check_level_change(ex.target, to_target)
    away = replace(ex.intruder, level_change=LevelChange(LevelDirection.CLIMB, 15000))
    assert check_level_change(ex.target, away)
    assert check_level_change(ex.target, ex.intruder) == []


def test_consistency_catches_tampered_situation():
    ex = converging_descending_heavy()
    sit = ex.situation

    wrong_clock = replace(ex, situation=replace(sit, clock=(sit.clock % 12) + 1))
    assert any("clock" in p for p in check_consistency(wrong_clock))

    wrong_dir = replace(ex, situation=replace(sit, direction=Direction.OPPOSITE))
    assert any("direction" in p for p in check_consistency(wrong_dir))

    wrong_dist = replace(ex, situation=replace(sit, distance=sit.distance + 3.0))
    assert any("distance" in p for p in check_consistency(wrong_dist))

    wrong_text = replace(ex, solution=ex.solution.replace("heavy", "medium"))
    assert any("solution" in p for p in check_consistency(wrong_text))

    label = replace(ex, situation=Situation(sit.clock, sit.distance, "same direction", sit.vertical_text))
    assert any("unknown direction" in p for p in check_consistency(label))


@settings(max_examples=60)
@given(err=st.floats(-0.49, 0.49))
def test_distance_tolerance_allows_small_errors(err):
    ex = converging_descending_heavy()
    sit = replace(ex.situation, distance=ex.situation.distance + err)
    problems = check_consistency(replace(ex, situation=sit))
    assert not any("distance" in p for p in problems)


def test_distance_tolerance_scales_with_range():
    ex = SCENARIOS["5"]()          # ~12 NM, tolerance 20%
    actual = ex.situation.distance
    sit = replace(ex.situation, distance=actual * (1 + config.DISTANCE_TOLERANCE_FRAC) - 0.1)
    assert not any("distance" in p for p in check_consistency(replace(ex, situation=sit)))


def test_monitor_accumulates_stats():
    mon = ExerciseMonitor()
    good = converging_descending_heavy()
    bad = crossing_left_to_right()

    assert mon.observe(good) == []
    assert mon.observe(bad)

    stats = mon.summary()
    assert stats.count == 2
    assert stats.failures == 1
    assert stats.pass_rate == pytest.approx(0.5)
    assert stats.directions[Direction.CONVERGING] == 1
    assert stats.share(stats.flight_rules, FlightRule.IFR) == pytest.approx(0.5)
    assert stats.level_changes == 1
    assert stats.min_distance_nm == good.situation.distance
    assert stats.max_distance_nm == bad.situation.distance
