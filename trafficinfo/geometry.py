import math
from typing import Tuple

from .math_utils import Vec2, dot, norm, sub, mul, add, heading_vector, perp_right, wrap_360, round_half_up
from .models import Aircraft, Position

MIN_REL_SPEED_KT = 0.1


def bearing(origin: Position, to: Position) -> float:
    """Absolute bearing origin -> to, clockwise from north, in [0, 360)."""
    dx = to.x - origin.x
    dy = to.y - origin.y
    return wrap_360(math.degrees(math.atan2(dx, dy)))


def relative_bearing(target_pos: Position, intruder_pos: Position, target_heading: float) -> float:
    return wrap_360(bearing(target_pos, intruder_pos) - target_heading)


def clock_position(target_pos: Position, intruder_pos: Position, target_heading: float) -> int:
    """Relative bearing in 30 deg sectors, 1..12 (sector 0 reads 12 o'clock)."""
    clock = round_half_up(relative_bearing(target_pos, intruder_pos, target_heading) / 30.0)
    return 12 if clock == 0 else clock


def heading_delta(a: float, b: float) -> float:
    """Heading difference folded into [0, 180]."""
    d = abs(wrap_360(a) - wrap_360(b))
    return 360.0 - d if d > 180.0 else d


def distance(a: Position, b: Position) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def velocity(heading: float, speed: float) -> Vec2:
    """Velocity in NM/h (kt) for a compass heading."""
    return mul(heading_vector(heading), speed)


def relative_position(target: Aircraft, intruder: Aircraft) -> Vec2:
    return sub(intruder.position.as_tuple(), target.position.as_tuple())


def relative_velocity(target: Aircraft, intruder: Aircraft) -> Vec2:
    return sub(velocity(intruder.heading, intruder.speed), velocity(target.heading, target.speed))


def is_converging(target: Aircraft, intruder: Aircraft) -> bool:
    return dot(relative_position(target, intruder), relative_velocity(target, intruder)) < 0.0


def crossing_component(target: Aircraft, intruder: Aircraft) -> float:
    """
    Lateral component of the relative velocity on the target's right-hand
    axis. Positive when the intruder moves from the target's left to its right.
    """
    right = perp_right(heading_vector(target.heading))
    return dot(relative_velocity(target, intruder), right)


def cpa_from_relative(rel_pos: Vec2, rel_vel: Vec2) -> Tuple[float, float]:
    """
    (time_h, d_cpa_nm) for a relative position/velocity pair.

    Below MIN_REL_SPEED_KT, or when CPA lies in the past, the CPA distance
    is the current distance. Time is 0 for the degenerate case.
    """
    current = norm(rel_pos)
    rel_speed = norm(rel_vel)
    if rel_speed <= MIN_REL_SPEED_KT:
        return 0.0, current
    t = -dot(rel_pos, rel_vel) / (rel_speed * rel_speed)
    if t <= 0.0:
        return t, current
    return t, norm(add(rel_pos, mul(rel_vel, t)))


def closest_approach(target: Aircraft, intruder: Aircraft) -> Tuple[float, float]:
    """(distance_nm, time_h) at the closest point of approach."""
    t, d_cpa = cpa_from_relative(relative_position(target, intruder),
                                 relative_velocity(target, intruder))
    return d_cpa, t


def project(position: Position, heading: float, speed: float, hours: float) -> Position:
    dx, dy = velocity(heading, speed)
    return Position(position.x + dx * hours, position.y + dy * hours)


def projected_separation(target: Aircraft, intruder: Aircraft, hours: float) -> float:
    t_pos = project(target.position, target.heading, target.speed, hours)
    i_pos = project(intruder.position, intruder.heading, intruder.speed, hours)
    return distance(t_pos, i_pos)
