import random
from typing import Iterator, Optional

from trafficinfo.models import Exercise
from sim.builder import ScenarioBuilder


def generate_exercise(
    rng: Optional[random.Random] = None,
    *,
    direction_weights=None,
    flight_rule_weights=None,
    max_retries: Optional[int] = None,
) -> Exercise:
    """
    One complete, validated traffic-information exercise.

    Pass a seeded random.Random for reproducible output; without one each
    call draws from a fresh generator. Weight overrides accept Direction /
    FlightRule members or their string values as keys.
    """
    builder = ScenarioBuilder(
        rng,
        direction_weights=direction_weights,
        flight_rule_weights=flight_rule_weights,
        max_retries=max_retries,
    )
    return builder.build()


def generate_batch(count: int, rng: Optional[random.Random] = None, **options) -> Iterator[Exercise]:
    """Yield `count` exercises from one shared generator."""
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    builder = ScenarioBuilder(rng if rng is not None else random.Random(), **options)
    for _ in range(count):
        yield builder.build()
