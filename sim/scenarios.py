from typing import Dict, Callable

from trafficinfo.catalog import type_by_designator
from trafficinfo.classify import build_exercise
from trafficinfo.models import Aircraft, Exercise, FlightRule, LevelChange, LevelDirection, ORIGIN, Position

VFR, IFR = FlightRule.VFR, FlightRule.IFR


def _pair(rule, target, intruder) -> Exercise:
    (t_cs, t_type, t_hdg, t_spd, t_lvl) = target
    (i_cs, i_type, pos, i_hdg, i_spd, i_lvl, change) = intruder
    return build_exercise(
        Aircraft(t_cs, type_by_designator(t_type), rule, ORIGIN, t_hdg, t_spd, t_lvl),
        Aircraft(i_cs, type_by_designator(i_type), rule, pos, i_hdg, i_spd, i_lvl, change),
    )


def crossing_left_to_right() -> Exercise:
    # Intruder at bearing 045, 8 NM, heading east. Opening, not closing:
    # a classification reference only.
    return _pair(
        VFR,
        ("PHABC", "C172", 0, 120, 2500),
        ("G-OSKY", "P28A", Position(5.657, 5.657), 90, 150, 3500, None),
    )


def overtaking_ahead() -> Exercise:
    # Faster intruder dead ahead on almost the same track (target heading 360).
    return _pair(
        IFR,
        ("KLM1734", "E190", 0, 140, 9000),
        ("BAW22K", "A320", Position(0.0, 5.0), 358, 200, 10000, None),
    )


def crossing_right_to_left() -> Exercise:
    return _pair(
        VFR,
        ("N4RT", "C152", 90, 110, 2500),
        ("TRAINER12", "DA40", Position(5.5, -5.0), 0, 100, 3000, None),
    )


def converging_descending_heavy() -> Exercise:
    return _pair(
        IFR,
        ("DLH4CP", "A320", 0, 200, 9000),
        ("UAL901", "B77W", Position(-4.5, 2.0), 30, 180, 11000,
         LevelChange(LevelDirection.DESCEND, 7000)),
    )


def opposite_direction() -> Exercise:
    return _pair(
        VFR,
        ("D-EFLY", "C172", 270, 120, 2500),
        ("F-GKQT", "P28A", Position(-12.0, 0.5), 90, 110, 2500, None),
    )


SCENARIOS: Dict[str, Callable[[], Exercise]] = {
    "1": crossing_left_to_right,
    "2": overtaking_ahead,
    "3": crossing_right_to_left,
    "4": converging_descending_heavy,
    "5": opposite_direction,
}
