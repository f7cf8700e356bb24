from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import List

import config
from .classify import classify_pair, crosses_target_level, render_solution, vertical_text
from .geometry import clock_position, closest_approach, distance, is_converging, projected_separation
from .models import Aircraft, Direction, Exercise, LevelDirection, ORIGIN


def _in_range(value: float, bounds) -> bool:
    lo, hi = bounds
    return lo <= value <= hi


def check_realism(target: Aircraft, intruder: Aircraft) -> List[str]:
    problems = []
    for role, ac in (("target", target), ("intruder", intruder)):
        if not _in_range(ac.speed, config.SPEED_KT):
            problems.append(f"unrealistic {role} speed: {ac.speed} kt")
        if not _in_range(ac.level, config.ALTITUDE_FT):
            problems.append(f"unrealistic {role} level: {ac.level} ft")
        if not 0 <= ac.heading < 360:
            problems.append(f"invalid {role} heading: {ac.heading}")
        if ac.level_change is not None and not _in_range(ac.level_change.target_level, config.ALTITUDE_FT):
            problems.append(f"unrealistic {role} cleared level: {ac.level_change.target_level} ft")
    sep = distance(target.position, intruder.position)
    if not _in_range(sep, config.INITIAL_DISTANCE_NM):
        problems.append(f"initial distance out of range: {sep:.2f} NM")
    return problems


def check_convergence(target: Aircraft, intruder: Aircraft) -> List[str]:
    problems = []
    if not is_converging(target, intruder):
        problems.append("diverging (relative position . relative velocity >= 0)")
    now = distance(target.position, intruder.position)
    later = projected_separation(target, intruder, config.PROJECTION_MIN / 60.0)
    if not later < now:
        problems.append(
            f"not closing over {config.PROJECTION_MIN:.0f} min: {now:.2f} -> {later:.2f} NM"
        )
    _, t_cpa = closest_approach(target, intruder)
    if t_cpa > config.MAX_CPA_TIME_H:
        problems.append(f"CPA too far ahead: {t_cpa * 60.0:.1f} min")
    return problems


def check_level_change(target: Aircraft, intruder: Aircraft) -> List[str]:
    change = intruder.level_change
    if change is None:
        return []
    if not crosses_target_level(target.level, intruder.level, change):
        verb = "descend" if change.direction is LevelDirection.DESCEND else "climb"
        return [
            f"intruder {verb} {intruder.level} -> {change.target_level} ft "
            f"does not cross target level {target.level} ft"
        ]
    return []


def check_flight_rules(target: Aircraft, intruder: Aircraft) -> List[str]:
    if target.flight_rule is not intruder.flight_rule:
        return [f"mixed flight rules: {target.flight_rule.value}/{intruder.flight_rule.value}"]
    return []


def check_consistency(exercise: Exercise) -> List[str]:
    """Re-derive clock, direction, distance and phraseology from the geometry."""
    target, intruder, sit = exercise.target, exercise.intruder, exercise.situation
    problems = []

    if target.position != ORIGIN:
        problems.append(f"target not at origin: {target.position}")

    clock = clock_position(target.position, intruder.position, target.heading)
    if clock != sit.clock:
        problems.append(f"clock mismatch: geometry {clock}, reported {sit.clock}")

    if not isinstance(sit.direction, Direction):
        problems.append(f"unknown direction label: {sit.direction!r}")
    else:
        expected = classify_pair(target, intruder)
        if expected is not sit.direction:
            problems.append(f"direction mismatch: geometry {expected.value}, reported {sit.direction.value}")

    actual = distance(target.position, intruder.position)
    tolerance = max(config.DISTANCE_TOLERANCE_NM, config.DISTANCE_TOLERANCE_FRAC * actual)
    if abs(actual - sit.distance) > tolerance:
        problems.append(f"distance mismatch: actual {actual:.1f} NM, reported {sit.distance} NM")

    if sit.vertical_text != vertical_text(target, intruder):
        problems.append(f"vertical text mismatch: {sit.vertical_text!r}")
    if isinstance(sit.direction, Direction) and exercise.solution != render_solution(target, intruder, sit):
        problems.append("solution does not match situation")
    return problems


def validate_exercise(exercise: Exercise) -> List[str]:
    """Every oracle check; an empty list means the exercise is valid."""
    t, i = exercise.target, exercise.intruder
    return (
        check_realism(t, i)
        + check_flight_rules(t, i)
        + check_convergence(t, i)
        + check_level_change(t, i)
        + check_consistency(exercise)
    )


@dataclass
class ExerciseStats:
    """Aggregated statistics over a batch of exercises."""
    count: int = 0
    failures: int = 0
    directions: Counter = field(default_factory=Counter)
    flight_rules: Counter = field(default_factory=Counter)
    clocks: Counter = field(default_factory=Counter)
    level_changes: int = 0
    min_distance_nm: float = field(default=float("inf"))
    max_distance_nm: float = 0.0

    def record(self, exercise: Exercise, problems: List[str]) -> None:
        self.count += 1
        if problems:
            self.failures += 1
        self.directions[exercise.situation.direction] += 1
        self.flight_rules[exercise.target.flight_rule] += 1
        self.clocks[exercise.situation.clock] += 1
        if exercise.intruder.level_change is not None:
            self.level_changes += 1
        d = exercise.situation.distance
        if d < self.min_distance_nm:
            self.min_distance_nm = d
        if d > self.max_distance_nm:
            self.max_distance_nm = d

    def share(self, counter: Counter, key) -> float:
        return counter[key] / self.count if self.count else 0.0

    @property
    def pass_rate(self) -> float:
        return (self.count - self.failures) / self.count if self.count else 0.0


class ExerciseMonitor:
    """
    Validates exercises and keeps running statistics.

    For each exercise we re-derive:
      - realism ranges (speed, level, heading, distance)
      - flight-rule pairing
      - convergence (dot product, 5-minute projection, CPA time)
      - level-change through-crossing
      - clock / direction / distance / phraseology consistency
    """

    def __init__(self) -> None:
        self.stats = ExerciseStats()

    def observe(self, exercise: Exercise) -> List[str]:
        problems = validate_exercise(exercise)
        self.stats.record(exercise, problems)
        return problems

    def summary(self) -> ExerciseStats:
        return self.stats
