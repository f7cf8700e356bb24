import math
from typing import Tuple

Vec2 = Tuple[float, float]

def dot(a: Vec2, b: Vec2) -> float:
    return a[0]*b[0] + a[1]*b[1]

def norm(a: Vec2) -> float:
    return math.hypot(a[0], a[1])

def add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0]+b[0], a[1]+b[1])

def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0]-b[0], a[1]-b[1])

def mul(a: Vec2, k: float) -> Vec2:
    return (a[0]*k, a[1]*k)

def unit(a: Vec2) -> Vec2:
    n = norm(a)
    if n == 0.0:
        return (0.0, 0.0)
    return (a[0]/n, a[1]/n)

def perp_right(a: Vec2) -> Vec2:
    # 90 deg clockwise in a north-up (x east, y north) frame
    return (a[1], -a[0])

def heading_vector(heading_deg: float) -> Vec2:
    """Unit vector for a compass heading: 0 = north (+y), 90 = east (+x)."""
    rad = math.radians(heading_deg)
    return (math.sin(rad), math.cos(rad))

def wrap_360(deg: float) -> float:
    wrapped = deg % 360.0
    # -1e-15 % 360 == 360.0 in floating point
    return 0.0 if wrapped >= 360.0 else wrapped

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
