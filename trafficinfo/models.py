from dataclasses import dataclass, field
from typing import Optional, Tuple
from enum import Enum


class FlightRule(Enum):
    VFR = "VFR"
    IFR = "IFR"


class WakeCategory(Enum):
    LIGHT = "L"
    MEDIUM = "M"
    HEAVY = "H"


class Direction(Enum):
    """Traffic direction phrases; the value is what the controller says."""
    CROSSING_LEFT_TO_RIGHT = "crossing left to right"
    CROSSING_RIGHT_TO_LEFT = "crossing right to left"
    CONVERGING = "converging"
    OPPOSITE = "opposite direction"
    OVERTAKING = "overtaking"


class LevelDirection(Enum):
    CLIMB = "climb"
    DESCEND = "descend"


class CallsignStyle(Enum):
    REGISTRATION = "registration"   # G-ABCD, N1AB, training calls
    AIRLINE = "airline"             # KLM1234
    MILITARY = "military"           # VIPER07


@dataclass(frozen=True)
class Position:
    x: float    # NM east of the target
    y: float    # NM north of the target

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


ORIGIN = Position(0.0, 0.0)


@dataclass(frozen=True)
class AircraftType:
    name: str
    designator: str                     # ICAO type designator
    wake: WakeCategory
    speed_kt: Tuple[int, int]           # (min, max)
    altitude_ft: Tuple[int, int]        # (min, max)
    callsign_style: CallsignStyle
    weight: float = 1.0                 # selection weight within its flight rule

    @property
    def is_heavy(self) -> bool:
        return self.wake is WakeCategory.HEAVY


@dataclass(frozen=True)
class LevelChange:
    direction: LevelDirection
    target_level: int                   # ft


@dataclass(frozen=True)
class Aircraft:
    # -------------------------------
    # Identity
    # -------------------------------
    callsign: str
    type: AircraftType
    flight_rule: FlightRule

    # -------------------------------
    # Kinematic state (target frame, NM / deg / kt / ft)
    # -------------------------------
    position: Position
    heading: int
    speed: int
    level: int
    level_change: Optional[LevelChange] = None

    # Radar trail, oldest -> newest, excludes the current position
    history: Tuple[Position, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Situation:
    clock: int                  # 1..12
    distance: float             # NM, one decimal
    direction: Direction
    vertical_text: str


@dataclass(frozen=True)
class Exercise:
    target: Aircraft
    intruder: Aircraft
    situation: Situation
    solution: str
