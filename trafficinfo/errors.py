from typing import List, Optional


class TrafficInfoError(RuntimeError):
    """Base class for errors surfaced by the exercise generator."""


class InvalidWeights(TrafficInfoError, ValueError):
    """Weighted selection got an empty option set or unusable weights."""


class ScenarioGenerationExhausted(TrafficInfoError):
    """The builder ran out of retries before producing a valid exercise."""

    def __init__(self, attempts: int, last_reason: Optional[str] = None) -> None:
        self.attempts = attempts
        self.last_reason = last_reason
        msg = f"No valid exercise after {attempts} retries"
        if last_reason:
            msg += f" (last rejection: {last_reason})"
        super().__init__(msg)


class InvariantViolation(TrafficInfoError):
    """An accepted exercise failed its final consistency check."""

    def __init__(self, problems: List[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invariant violated")
