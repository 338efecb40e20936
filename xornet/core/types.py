"""Core typing contracts for XorNet."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

Array = np.ndarray


class ShapeMismatch(ValueError):
    """A vector's length disagrees with the network's configured dimensions."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        super().__init__(
            f"invalid {what}: wanted {expected} values but have {actual}"
        )
        self.what = what
        self.expected = expected
        self.actual = actual
        # Filled in by run_epoch_set when the mismatch aborts a training set.
        self.iterations_completed: int | None = None
        self.error: float | None = None


@dataclass(frozen=True)
class Example:
    """A single labelled training example."""

    inputs: Tuple[float, ...]
    expected: Tuple[float, ...]

    @classmethod
    def of(cls, inputs: Sequence[float], expected: Sequence[float]) -> "Example":
        return cls(
            inputs=tuple(float(v) for v in inputs),
            expected=tuple(float(v) for v in expected),
        )


@dataclass(frozen=True)
class EpochResult:
    """Summary returned by :func:`xornet.training.controller.run_epoch_set`."""

    iterations: int
    error: float

    def __iter__(self):
        return iter((self.iterations, self.error))


class Outcome(enum.Enum):
    CONVERGED = "converged"
    STAGNATED = "stagnated"


STAGNATED = Outcome.STAGNATED


@dataclass(frozen=True)
class TrainOutcome:
    """Terminal state of :func:`xornet.training.controller.train_until_success`."""

    outcome: Outcome
    iterations: int
    success_rate: float
    error: float
    last_improvement: int

    @property
    def converged(self) -> bool:
        return self.outcome is Outcome.CONVERGED

    @property
    def stagnated(self) -> bool:
        return self.outcome is Outcome.STAGNATED


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`xornet.training.pipelines.run_pipeline`."""

    mode: str
    topology: str
    networks: int
    success_rate: float
    mean_iterations: float
    metrics_path: str = ""
    summary_path: str = ""


__all__ = [
    "Array",
    "EpochResult",
    "Example",
    "Outcome",
    "RunResult",
    "STAGNATED",
    "ShapeMismatch",
    "TrainOutcome",
]
