"""
Static aircraft catalog and callsign generation.

Types are partitioned by flight rule. Speed bands are terminal-area speeds
(IFR traffic at or below 250 kt), which is where traffic information is
passed and what keeps every direction category solvable inside the 15 NM
initial-distance envelope.
"""
import random
import string
from typing import Dict, List, Tuple

from .models import AircraftType, CallsignStyle, FlightRule, WakeCategory as W
from .selector import WeightedSelector

L, M, H = W.LIGHT, W.MEDIUM, W.HEAVY
REG, AIRLINE, MIL = CallsignStyle.REGISTRATION, CallsignStyle.AIRLINE, CallsignStyle.MILITARY

VFR_TYPES: Tuple[AircraftType, ...] = (
    AircraftType("Cessna 172",    "C172", L, (95, 125),  (1500, 4500), REG, weight=30),
    AircraftType("Piper PA-28",   "P28A", L, (90, 120),  (1500, 4500), REG, weight=25),
    AircraftType("Cessna 152",    "C152", L, (80, 100),  (1500, 3500), REG, weight=15),
    AircraftType("Diamond DA40",  "DA40", L, (115, 145), (1500, 5500), REG, weight=15),
    AircraftType("Robinson R44",  "R44",  L, (85, 105),  (1000, 2500), REG, weight=10),
    AircraftType("Sikorsky UH-60", "H60", M, (90, 140),  (1000, 4500), MIL, weight=5),
)

IFR_TYPES: Tuple[AircraftType, ...] = (
    AircraftType("Boeing 737",        "B738", M, (160, 250), (5000, 41000), AIRLINE, weight=25),
    AircraftType("Airbus A320",       "A320", M, (160, 250), (5000, 39000), AIRLINE, weight=25),
    AircraftType("Embraer 190",       "E190", M, (150, 250), (5000, 41000), AIRLINE, weight=12),
    AircraftType("Bombardier CRJ900", "CRJ9", M, (150, 240), (5000, 41000), AIRLINE, weight=8),
    AircraftType("ATR 72",            "AT72", M, (130, 220), (5000, 25000), AIRLINE, weight=12),
    AircraftType("De Havilland Dash 8", "DH8D", M, (140, 240), (5000, 27000), AIRLINE, weight=8),
    AircraftType("Boeing 777",        "B77W", H, (170, 250), (10000, 43000), AIRLINE, weight=6),
    AircraftType("Lockheed C-130",    "C130", M, (150, 250), (5000, 28000), MIL, weight=4),
)

TYPES_BY_RULE: Dict[FlightRule, Tuple[AircraftType, ...]] = {
    FlightRule.VFR: VFR_TYPES,
    FlightRule.IFR: IFR_TYPES,
}

REG_PREFIXES = ["N", "G-", "D-E", "F-", "OO-", "PH-", "C-"]
AIRLINE_CODES = ["KLM", "BAW", "DLH", "AFR", "UAL", "DAL", "AAL", "SWR", "IBE", "EZY", "RYR"]
TRAINING_CALLS = ["TRAINER", "STUDENT", "CESSNA", "PIPER", "DIAMOND"]
MIL_CALLS = ["VIPER", "FALCON", "EAGLE", "HAWK", "REACH", "CONVOY", "GRIZZLY", "WOLF"]

TRAINING_CALL_SHARE = 0.3
AIRLINE_SUFFIX_LENGTHS = {3: 150, 4: 45, 2: 20, 1: 10}
SUFFIX_LETTER_CHANCE = 0.25


def type_by_designator(designator: str) -> AircraftType:
    for types in TYPES_BY_RULE.values():
        for t in types:
            if t.designator == designator:
                return t
    raise KeyError(f"unknown aircraft type designator: {designator}")


def type_selector(rule: FlightRule) -> WeightedSelector[AircraftType]:
    return WeightedSelector((t, t.weight) for t in TYPES_BY_RULE[rule])


def pick_type(rule: FlightRule, rng: random.Random) -> AircraftType:
    return type_selector(rule).pick(rng)


def _letters(rng: random.Random, n: int) -> str:
    return "".join(rng.choice(string.ascii_uppercase) for _ in range(n))


def registration_callsign(rng: random.Random) -> str:
    if rng.random() < TRAINING_CALL_SHARE:
        return f"{rng.choice(TRAINING_CALLS)}{rng.randint(1, 99)}"
    prefix = rng.choice(REG_PREFIXES)
    if prefix == "N":
        return f"N{rng.randint(1, 9)}{_letters(rng, 2)}"
    if rng.random() < 0.7:
        return prefix + _letters(rng, rng.randint(2, 3))
    return f"{prefix}{rng.randint(100, 999)}"


def airline_callsign(rng: random.Random) -> str:
    """ICAO airline code + suffix; first suffix char is a digit, letters only trail."""
    length = WeightedSelector(AIRLINE_SUFFIX_LENGTHS).pick(rng)
    suffix = str(rng.randint(0, 9))
    while len(suffix) < length:
        if suffix[-1].isalpha() or rng.random() < SUFFIX_LETTER_CHANCE:
            suffix += rng.choice(string.ascii_uppercase)
        else:
            suffix += str(rng.randint(0, 9))
    return rng.choice(AIRLINE_CODES) + suffix


def military_callsign(rng: random.Random) -> str:
    return f"{rng.choice(MIL_CALLS)}{rng.randint(1, 99):02d}"


_CALLSIGN_MAKERS = {
    CallsignStyle.REGISTRATION: registration_callsign,
    CallsignStyle.AIRLINE: airline_callsign,
    CallsignStyle.MILITARY: military_callsign,
}


def make_callsign(ac_type: AircraftType, rng: random.Random) -> str:
    return _CALLSIGN_MAKERS[ac_type.callsign_style](rng)


def callsign_pair(target_type: AircraftType, intruder_type: AircraftType,
                  rng: random.Random) -> Tuple[str, str]:
    target_cs = make_callsign(target_type, rng)
    intruder_cs = make_callsign(intruder_type, rng)
    while intruder_cs == target_cs:
        intruder_cs = make_callsign(intruder_type, rng)
    return target_cs, intruder_cs


def cruising_levels(rule: FlightRule, low_ft: int, high_ft: int) -> List[int]:
    """
    Levels available between low_ft and high_ft (inclusive).

    VFR uses thousands + 500 ft, IFR whole thousands.
    """
    offset = 500 if rule is FlightRule.VFR else 0
    levels = []
    level = (low_ft // 1000) * 1000 + offset
    while level <= high_ft:
        if level >= low_ft:
            levels.append(level)
        level += 1000
    return levels
