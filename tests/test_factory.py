import random
from collections import Counter

import pytest
from hypothesis import given, settings, strategies as st

import config
from sim.factory import generate_batch, generate_exercise
from trafficinfo.classify import crosses_target_level
from trafficinfo.errors import InvalidWeights
from trafficinfo.geometry import clock_position, distance, projected_separation
from trafficinfo.models import Direction, FlightRule, ORIGIN
from trafficinfo.monitor import validate_exercise


@settings(max_examples=100, deadline=None)
@given(seed=st.integers(0, 2**32 - 1))
def test_generated_exercise_properties(seed):
    ex = generate_exercise(random.Random(seed))
    t, i, sit = ex.target, ex.intruder, ex.situation

    assert validate_exercise(ex) == []

    assert t.position == ORIGIN
    assert clock_position(t.position, i.position, t.heading) == sit.clock
    assert 1 <= sit.clock <= 12
    assert sit.direction in set(Direction)

    actual = distance(t.position, i.position)
    tolerance = max(config.DISTANCE_TOLERANCE_NM, config.DISTANCE_TOLERANCE_FRAC * actual)
    assert abs(actual - sit.distance) <= tolerance
    assert config.INITIAL_DISTANCE_NM[0] <= actual <= config.INITIAL_DISTANCE_NM[1]

    # strictly closer after five minutes
    assert projected_separation(t, i, config.PROJECTION_MIN / 60.0) < actual

    if i.level_change is not None:
        assert crosses_target_level(t.level, i.level, i.level_change)

    assert t.flight_rule is i.flight_rule
    assert t.callsign != i.callsign
    assert ex.solution.startswith(f"{t.callsign}, traffic, {sit.clock} o'clock, ")
    assert len(t.history) == len(i.history) == config.HISTORY_DOTS


def test_seeded_generation_is_deterministic():
    assert generate_exercise(random.Random(2024)) == generate_exercise(random.Random(2024))


def test_unseeded_generation_works():
    ex = generate_exercise()
    assert validate_exercise(ex) == []


def test_distribution_over_1000_exercises():
    exercises = list(generate_batch(1000, random.Random(77)))
    rules = Counter(ex.target.flight_rule for ex in exercises)
    directions = Counter(ex.situation.direction for ex in exercises)

    assert 0.70 <= rules[FlightRule.VFR] / 1000 <= 0.80
    for d in Direction:
        assert directions[d] / 1000 >= 0.10, d


def test_batch_count_and_shared_rng():
    batch = list(generate_batch(5, random.Random(1)))
    assert len(batch) == 5
    again = list(generate_batch(5, random.Random(1)))
    assert batch == again
    assert list(generate_batch(0, random.Random(1))) == []


def test_batch_rejects_negative_count():
    with pytest.raises(ValueError):
        list(generate_batch(-1))


@pytest.mark.parametrize("direction", list(Direction))
def test_direction_override_forces_category(direction):
    rng = random.Random(5)
    for _ in range(10):
        ex = generate_exercise(rng, direction_weights={direction: 1})
        assert ex.situation.direction is direction


def test_flight_rule_override_with_string_keys():
    rng = random.Random(6)
    for _ in range(20):
        ex = generate_exercise(rng, flight_rule_weights={"IFR": 1, "VFR": 0})
        assert ex.target.flight_rule is FlightRule.IFR
        assert ex.intruder.flight_rule is FlightRule.IFR


def test_ifr_opposite_direction_is_solvable():
    rng = random.Random(9)
    for _ in range(10):
        ex = generate_exercise(
            rng,
            direction_weights={Direction.OPPOSITE: 1},
            flight_rule_weights={FlightRule.IFR: 1},
        )
        assert ex.situation.direction is Direction.OPPOSITE
        assert validate_exercise(ex) == []


def test_invalid_overrides_raise():
    with pytest.raises(InvalidWeights):
        generate_exercise(random.Random(0), direction_weights={})
    with pytest.raises(InvalidWeights):
        generate_exercise(random.Random(0), flight_rule_weights={"VFR": 0, "IFR": 0})
    with pytest.raises(ValueError):
        generate_exercise(random.Random(0), direction_weights={"sideways": 1})
