from bisect import bisect_left
import math
import random
from typing import Generic, Iterable, List, Mapping, Tuple, TypeVar, Union

from .errors import InvalidWeights

T = TypeVar("T")

WeightSpec = Union[Mapping[T, float], Iterable[Tuple[T, float]]]


class WeightedSelector(Generic[T]):
    """
    Weighted random choice over labelled options.

    Builds a monotonically increasing cumulative-weight table once; each
    pick draws uniformly in [0, total) and returns the first option whose
    cumulative weight is >= the draw. Duplicate options are kept as
    independent weight mass. Zero-weight options are dropped.
    """

    def __init__(self, weights: "WeightSpec[T]") -> None:
        pairs = list(weights.items()) if isinstance(weights, Mapping) else list(weights)
        if not pairs:
            raise InvalidWeights("weighted selection needs at least one option")

        self._options: List[T] = []
        self._cumulative: List[float] = []
        total = 0.0
        for option, weight in pairs:
            w = float(weight)
            if not math.isfinite(w) or w < 0.0:
                raise InvalidWeights(f"invalid weight {weight!r} for option {option!r}")
            if w == 0.0:
                continue
            total += w
            self._options.append(option)
            self._cumulative.append(total)

        if total <= 0.0:
            raise InvalidWeights("all weights are zero")
        self.total = total

    def __len__(self) -> int:
        return len(self._options)

    def pick(self, rng: random.Random) -> T:
        draw = rng.random() * self.total
        idx = bisect_left(self._cumulative, draw)
        # guards the draw == total float edge
        return self._options[min(idx, len(self._options) - 1)]

    def probability(self, option: T) -> float:
        """Share of the total weight carried by `option` (summed over duplicates)."""
        mass = 0.0
        prev = 0.0
        for opt, cum in zip(self._options, self._cumulative):
            if opt == option:
                mass += cum - prev
            prev = cum
        return mass / self.total


def weighted_choice(weights: "WeightSpec[T]", rng: random.Random) -> T:
    return WeightedSelector(weights).pick(rng)
