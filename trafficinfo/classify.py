from typing import Optional

import config
from .geometry import clock_position, crossing_component, distance, heading_delta
from .math_utils import round_half_up
from .models import Aircraft, Direction, Exercise, LevelChange, LevelDirection, Situation, WakeCategory


def classify_direction(delta_deg: float, crossing: float,
                       target_speed: float, intruder_speed: float) -> Direction:
    """
    Map heading delta (folded, deg) and crossing sign to a traffic direction.

    Precedence:
      - overtaking:   delta <= 45 and intruder faster
      - converging:   delta < 45
      - crossing:     45 <= delta <= 135, side from the crossing sign
      - opposite:     delta > 135
    """
    if delta_deg <= config.SAME_TRACK_MAX_DEG and intruder_speed > target_speed:
        return Direction.OVERTAKING
    if delta_deg < config.SAME_TRACK_MAX_DEG:
        return Direction.CONVERGING
    if delta_deg <= config.CROSSING_MAX_DEG:
        if crossing >= 0.0:
            return Direction.CROSSING_LEFT_TO_RIGHT
        return Direction.CROSSING_RIGHT_TO_LEFT
    return Direction.OPPOSITE


def classify_pair(target: Aircraft, intruder: Aircraft) -> Direction:
    return classify_direction(
        heading_delta(target.heading, intruder.heading),
        crossing_component(target, intruder),
        target.speed,
        intruder.speed,
    )


def crosses_target_level(target_level: int, intruder_level: int,
                         change: Optional[LevelChange]) -> bool:
    """True when the level change passes through the target level (never ends on it)."""
    if change is None:
        return False
    if change.direction is LevelDirection.DESCEND:
        return intruder_level >= target_level and change.target_level < target_level
    return intruder_level <= target_level and change.target_level > target_level


def distance_text(distance_nm: float) -> str:
    miles = round_half_up(distance_nm)
    return "1 mile" if miles == 1 else f"{miles} miles"


def vertical_text(target: Aircraft, intruder: Aircraft) -> str:
    diff = intruder.level - target.level
    rounded = round_half_up(abs(diff) / 100.0) * 100
    if abs(diff) < config.SAME_ALTITUDE_FT:
        text = "same altitude"
    else:
        text = f"{rounded} feet {'above' if diff > 0 else 'below'}"

    change = intruder.level_change
    if crosses_target_level(target.level, intruder.level, change):
        verb = "descending" if change.direction is LevelDirection.DESCEND else "climbing"
        text += f", {verb} through your altitude"
    return text


def describe_situation(target: Aircraft, intruder: Aircraft) -> Situation:
    return Situation(
        clock=clock_position(target.position, intruder.position, target.heading),
        distance=round(distance(target.position, intruder.position), 1),
        direction=classify_pair(target, intruder),
        vertical_text=vertical_text(target, intruder),
    )


def render_solution(target: Aircraft, intruder: Aircraft, situation: Situation) -> str:
    parts = [
        target.callsign,
        "traffic",
        f"{situation.clock} o'clock",
        distance_text(situation.distance),
        situation.direction.value,
        situation.vertical_text,
        intruder.type.name,
    ]
    solution = ", ".join(parts)
    if intruder.type.wake is WakeCategory.HEAVY:
        solution += ", heavy"
    return solution


def build_exercise(target: Aircraft, intruder: Aircraft) -> Exercise:
    situation = describe_situation(target, intruder)
    return Exercise(target, intruder, situation, render_solution(target, intruder, situation))
