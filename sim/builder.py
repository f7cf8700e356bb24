"""
Scenario builder: bounded rejection sampling of one traffic exercise.

States:
    SELECT_CATEGORY -> SOLVE_KINEMATICS -> VALIDATE -> ACCEPT
                              ^                |
                              +---- RETRY <----+

Kinematics are solved constructively so that a candidate normally passes
validation first time:
    - the heading offset is drawn inside the band of the chosen direction
    - speeds are drawn inside each type's band, under the direction's speed
      rule and a closing-speed cap that keeps the 5-minute check feasible
    - the intruder is placed up-stream of the relative velocity, so the pair
      converges and reaches CPA within MAX_CPA_TIME_H

Every rejection names what to resample. Exceeding the retry budget raises
ScenarioGenerationExhausted; an accepted exercise that fails the final
oracle check raises InvariantViolation.
"""
from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Mapping, Optional, Tuple

import config
from trafficinfo import catalog
from trafficinfo.classify import build_exercise, classify_pair, crosses_target_level
from trafficinfo.errors import InvariantViolation, ScenarioGenerationExhausted
from trafficinfo.geometry import clock_position, distance, project, velocity
from trafficinfo.math_utils import add, mul, norm, perp_right, sub, unit
from trafficinfo.models import (
    Aircraft, AircraftType, Direction, Exercise, FlightRule,
    LevelChange, LevelDirection, ORIGIN, Position,
)
from trafficinfo.monitor import check_convergence, check_level_change, check_realism, validate_exercise
from trafficinfo.selector import WeightedSelector

logger = logging.getLogger(__name__)


class Stage(Enum):
    SELECT_CATEGORY = auto()
    SOLVE_KINEMATICS = auto()
    VALIDATE = auto()
    RETRY = auto()
    ACCEPT = auto()


class Resample(Enum):
    KINEMATICS = auto()     # keep category and types, re-solve geometry
    TYPES = auto()          # keep flight rule and direction, redraw types
    CATEGORY = auto()       # start over


class Rejection(Exception):
    """Internal: a candidate (or a partial solve) was rejected."""

    def __init__(self, reason: str, resample: Resample) -> None:
        super().__init__(reason)
        self.reason = reason
        self.resample = resample


@dataclass(frozen=True)
class Selection:
    flight_rule: FlightRule
    direction: Direction
    target_type: AircraftType
    intruder_type: AircraftType


@dataclass(frozen=True)
class Candidate:
    selection: Selection
    target: Aircraft
    intruder: Aircraft
    planned_distance: float


def _keyed(weights, enum_cls):
    pairs = weights.items() if isinstance(weights, Mapping) else weights
    return [(enum_cls(key), w) for key, w in pairs]


def closing_speed_cap() -> float:
    """Largest relative speed (kt) that still closes over PROJECTION_MIN within MAX_ALONG_TRACK_NM."""
    projection_h = config.PROJECTION_MIN / 60.0
    return 2.0 * config.MAX_ALONG_TRACK_NM / (config.CLOSING_MARGIN * projection_h)


def relative_speed(target_speed: float, intruder_speed: float, delta_deg: float) -> float:
    cos_d = math.cos(math.radians(delta_deg))
    sq = target_speed ** 2 + intruder_speed ** 2 - 2.0 * target_speed * intruder_speed * cos_d
    return math.sqrt(max(sq, 0.0))


def radar_trail(ac: Aircraft) -> Tuple[Position, ...]:
    """Past positions along the current velocity, oldest first."""
    step_h = config.HISTORY_INTERVAL_S / 3600.0
    return tuple(
        project(ac.position, ac.heading, ac.speed, -k * step_h)
        for k in range(config.HISTORY_DOTS, 0, -1)
    )


class ScenarioBuilder:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        direction_weights=None,
        flight_rule_weights=None,
        max_retries: Optional[int] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.direction_selector = WeightedSelector(
            _keyed(config.DIRECTION_WEIGHTS if direction_weights is None else direction_weights, Direction)
        )
        self.rule_selector = WeightedSelector(
            _keyed(config.FLIGHT_RULE_WEIGHTS if flight_rule_weights is None else flight_rule_weights, FlightRule)
        )
        self.vertical_selector = WeightedSelector(config.VERTICAL_WEIGHTS)
        self.type_selectors = {rule: catalog.type_selector(rule) for rule in FlightRule}

        self.max_retries = config.MAX_RETRIES if max_retries is None else int(max_retries)
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self.attempts = 0

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def build(self) -> Exercise:
        stage = Stage.SELECT_CATEGORY
        selection: Optional[Selection] = None
        candidate: Optional[Candidate] = None
        rejection: Optional[Rejection] = None
        type_failures = 0
        self.attempts = 0

        while True:
            if stage is Stage.SELECT_CATEGORY:
                selection = self.select_category()
                type_failures = 0
                stage = Stage.SOLVE_KINEMATICS

            elif stage is Stage.SOLVE_KINEMATICS:
                try:
                    candidate = self.solve_kinematics(selection)
                    stage = Stage.VALIDATE
                except Rejection as r:
                    rejection, stage = r, Stage.RETRY

            elif stage is Stage.VALIDATE:
                try:
                    self.validate(candidate)
                    stage = Stage.ACCEPT
                except Rejection as r:
                    rejection, stage = r, Stage.RETRY

            elif stage is Stage.RETRY:
                self.attempts += 1
                logger.debug("retry %d [%s, %s]: %s", self.attempts,
                             selection.direction.value, rejection.resample.name, rejection.reason)
                if self.attempts > self.max_retries:
                    logger.warning("giving up after %d retries: %s", self.max_retries, rejection.reason)
                    raise ScenarioGenerationExhausted(self.max_retries, rejection.reason)

                if rejection.resample is Resample.KINEMATICS:
                    stage = Stage.SOLVE_KINEMATICS
                elif rejection.resample is Resample.TYPES and type_failures + 1 < config.TYPE_RESAMPLE_LIMIT:
                    type_failures += 1
                    selection = self.select_types(selection.flight_rule, selection.direction)
                    stage = Stage.SOLVE_KINEMATICS
                else:
                    stage = Stage.SELECT_CATEGORY

            else:
                return self.accept(candidate)

    # ------------------------------------------------------------------
    # SELECT_CATEGORY
    # ------------------------------------------------------------------

    def select_category(self) -> Selection:
        rule = self.rule_selector.pick(self.rng)
        direction = self.direction_selector.pick(self.rng)
        return self.select_types(rule, direction)

    def select_types(self, rule: FlightRule, direction: Direction) -> Selection:
        types = self.type_selectors[rule]
        return Selection(rule, direction, types.pick(self.rng), types.pick(self.rng))

    # ------------------------------------------------------------------
    # SOLVE_KINEMATICS
    # ------------------------------------------------------------------

    def solve_kinematics(self, sel: Selection) -> Candidate:
        rng = self.rng
        lo, hi = config.HEADING_DELTA_BANDS[sel.direction.value]
        delta = rng.randint(lo, hi)
        if sel.direction is Direction.CROSSING_LEFT_TO_RIGHT:
            side = 1
        elif sel.direction is Direction.CROSSING_RIGHT_TO_LEFT:
            side = -1
        else:
            side = rng.choice((-1, 1))

        target_heading = rng.randint(0, 359)
        intruder_heading = (target_heading + side * delta) % 360

        target_speed, intruder_speed = self.solve_speeds(sel, delta)
        target_level, intruder_level, change = self.solve_levels(sel)

        rel_vel = sub(velocity(intruder_heading, intruder_speed),
                      velocity(target_heading, target_speed))
        position, planned = self.place_intruder(rel_vel)

        target_cs, intruder_cs = catalog.callsign_pair(sel.target_type, sel.intruder_type, rng)
        target = Aircraft(target_cs, sel.target_type, sel.flight_rule, ORIGIN,
                          target_heading, target_speed, target_level)
        intruder = Aircraft(intruder_cs, sel.intruder_type, sel.flight_rule, position,
                            intruder_heading, intruder_speed, intruder_level, change)
        return Candidate(sel, target, intruder, planned)

    def solve_speeds(self, sel: Selection, delta: int) -> Tuple[int, int]:
        """
        Integer speeds inside both type bands such that:
          - overtaking: intruder >= target + OVERTAKE_MARGIN_KT
          - converging: intruder <= target (otherwise it reads as overtaking)
          - REL_SPEED_MIN_KT <= |relative velocity| <= closing_speed_cap()
        """
        rng = self.rng
        cap = closing_speed_cap()
        cos_d = math.cos(math.radians(delta))
        sin_d = math.sin(math.radians(delta))
        t_lo, t_hi = sel.target_type.speed_kt

        for _ in range(config.SPEED_ATTEMPTS):
            vt = rng.randint(t_lo, t_hi)
            i_lo, i_hi = sel.intruder_type.speed_kt
            if sel.direction is Direction.OVERTAKING:
                i_lo = max(i_lo, vt + config.OVERTAKE_MARGIN_KT)
            elif sel.direction is Direction.CONVERGING:
                i_hi = min(i_hi, vt)

            # |v_rel| <= cap  <=>  vi inside the roots of
            # vi^2 - 2 vt cos(d) vi + vt^2 - cap^2 = 0
            disc = cap * cap - (vt * sin_d) ** 2
            if disc < 0.0:
                continue
            root = math.sqrt(disc)
            i_lo = max(i_lo, math.ceil(vt * cos_d - root))
            i_hi = min(i_hi, math.floor(vt * cos_d + root))
            if i_lo > i_hi:
                continue

            vi = rng.randint(i_lo, i_hi)
            if relative_speed(vt, vi, delta) < config.REL_SPEED_MIN_KT:
                continue
            return vt, vi

        raise Rejection(
            f"no speed pair for {sel.direction.value}: "
            f"{sel.target_type.designator} vs {sel.intruder_type.designator}",
            Resample.TYPES,
        )

    def solve_levels(self, sel: Selection) -> Tuple[int, int, Optional[LevelChange]]:
        rng = self.rng
        rule = sel.flight_rule
        low = max(sel.target_type.altitude_ft[0], sel.intruder_type.altitude_ft[0], config.ALTITUDE_FT[0])
        high = min(sel.target_type.altitude_ft[1], sel.intruder_type.altitude_ft[1], config.ALTITUDE_FT[1])
        levels = catalog.cruising_levels(rule, low, high)
        if not levels:
            raise Rejection(
                f"no common level for {sel.target_type.designator} and {sel.intruder_type.designator}",
                Resample.TYPES,
            )

        step = config.VERTICAL_STEP_FT[rule.value]
        alt_lo, alt_hi = config.ALTITUDE_FT
        for _ in range(config.LEVEL_ATTEMPTS):
            target_level = rng.choice(levels)
            relation = self.vertical_selector.pick(rng)
            if relation == "same":
                return target_level, target_level, None

            sign = 1 if relation == "above" else -1
            intruder_level = target_level + sign * step * rng.randint(1, config.MAX_VERTICAL_STEPS[rule.value])
            if not alt_lo <= intruder_level <= alt_hi:
                continue
            change = self.solve_level_change(rule, target_level, intruder_level)
            return target_level, intruder_level, change

        raise Rejection("no realistic vertical geometry", Resample.KINEMATICS)

    def solve_level_change(self, rule: FlightRule, target_level: int,
                           intruder_level: int) -> Optional[LevelChange]:
        """Optional clearance that takes the intruder through (never to) the target level."""
        rng = self.rng
        if rng.random() >= config.LEVEL_CHANGE_PROBABILITY[rule.value]:
            return None
        overshoot = config.VERTICAL_STEP_FT[rule.value] * rng.randint(1, config.MAX_LEVEL_CHANGE_STEPS)
        if intruder_level > target_level:
            change = LevelChange(LevelDirection.DESCEND, target_level - overshoot)
        else:
            change = LevelChange(LevelDirection.CLIMB, target_level + overshoot)

        alt_lo, alt_hi = config.ALTITUDE_FT
        if not (alt_lo <= change.target_level <= alt_hi
                and crosses_target_level(target_level, intruder_level, change)):
            logger.debug("dropping level change to %d ft (target %d ft)", change.target_level, target_level)
            return None
        return change

    def place_intruder(self, rel_vel) -> Tuple[Position, float]:
        """
        Put the intruder up-stream of the relative velocity.

        along-track distance in [lo, hi]:
          lo: closes over PROJECTION_MIN (CPA later than half the window)
          hi: CPA within MAX_CPA_TIME_H, initial distance inside the cap
        plus a lateral miss offset of at most MAX_MISS_NM.
        """
        rng = self.rng
        rel_speed = norm(rel_vel)
        if rel_speed < config.REL_SPEED_MIN_KT:
            raise Rejection(f"relative speed too low: {rel_speed:.1f} kt", Resample.KINEMATICS)

        projection_h = config.PROJECTION_MIN / 60.0
        along_lo = max(config.INITIAL_DISTANCE_NM[0],
                       config.CLOSING_MARGIN * rel_speed * projection_h / 2.0)
        along_hi = min(config.MAX_ALONG_TRACK_NM,
                       rel_speed * config.MAX_CPA_TIME_H / config.CLOSING_MARGIN)
        if along_lo > along_hi:
            raise Rejection(f"closing speed {rel_speed:.0f} kt has no valid placement", Resample.KINEMATICS)

        along = rng.uniform(along_lo, along_hi)
        miss = rng.uniform(-1.0, 1.0) * min(config.MAX_MISS_NM, config.MISS_FRACTION * along)
        approach = unit(rel_vel)
        x, y = add(mul(approach, -along), mul(perp_right(approach), miss))
        return Position(x, y), math.hypot(along, miss)

    # ------------------------------------------------------------------
    # VALIDATE / ACCEPT
    # ------------------------------------------------------------------

    def validate(self, cand: Candidate) -> None:
        t, i = cand.target, cand.intruder

        problems = check_realism(t, i)
        if problems:
            raise Rejection("; ".join(problems), Resample.KINEMATICS)

        problems = check_convergence(t, i) + check_level_change(t, i)
        if problems:
            raise Rejection("; ".join(problems), Resample.KINEMATICS)

        direction = classify_pair(t, i)
        if direction is not cand.selection.direction:
            raise Rejection(
                f"built for {cand.selection.direction.value}, classifies as {direction.value}",
                Resample.CATEGORY,
            )

        measured = distance(t.position, i.position)
        if abs(measured - cand.planned_distance) > 1e-6:
            raise Rejection(
                f"placement drift: planned {cand.planned_distance:.3f} NM, measured {measured:.3f} NM",
                Resample.KINEMATICS,
            )

        clock = clock_position(t.position, i.position, t.heading)
        if not 1 <= clock <= 12:
            raise Rejection(f"clock out of range: {clock}", Resample.KINEMATICS)

    def accept(self, cand: Candidate) -> Exercise:
        target = replace(cand.target, history=radar_trail(cand.target))
        intruder = replace(cand.intruder, history=radar_trail(cand.intruder))
        exercise = build_exercise(target, intruder)

        problems = validate_exercise(exercise)
        if problems:
            raise InvariantViolation(problems)

        logger.debug("accepted after %d retries: %s", self.attempts, exercise.solution)
        return exercise
