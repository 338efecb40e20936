"""Single-hidden-layer sigmoid network trained by online backpropagation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from .activations import sigmoid, sigmoid_deriv
from .types import Array, ShapeMismatch

DEFAULT_LEARNING_RATE = 0.2

HIDDEN_CREDIT_MODES = ("post_update", "pre_update")


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return a generator for weight initialisation.

    Without ``seed`` numpy draws fresh entropy from the operating system, so
    separate processes start from distinct weights.
    """

    return np.random.default_rng(seed)


def _ratio_thresholds(rng: np.random.Generator, size: int) -> Array:
    # Quotient of two uniform draws; intentionally not uniform itself.
    return rng.random(size) / rng.random(size)


@dataclass(eq=False)
class NetworkState:
    """Numeric state of a fully-connected ``inputs-hidden-outputs`` network.

    Call :meth:`load_inputs` then :meth:`activate` before :meth:`train` or
    :meth:`results`; out-of-order calls see the previous activation.
    """

    input_count: int
    hidden_count: int
    output_count: int
    rng: np.random.Generator | None = field(default=None, repr=False)
    hidden_credit: str = "post_update"
    inputs: Array = field(init=False, repr=False)
    input_weights: Array = field(init=False, repr=False)
    hidden: Array = field(init=False, repr=False)
    hidden_thresholds: Array = field(init=False, repr=False)
    hidden_weights: Array = field(init=False, repr=False)
    outputs: Array = field(init=False, repr=False)
    output_thresholds: Array = field(init=False, repr=False)
    _learning_rate: float = field(init=False, default=DEFAULT_LEARNING_RATE, repr=False)

    def __post_init__(self) -> None:
        for name in ("input_count", "hidden_count", "output_count"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.hidden_credit not in HIDDEN_CREDIT_MODES:
            raise ValueError(f"Unknown hidden credit mode: {self.hidden_credit}")
        rng = self.rng if self.rng is not None else make_rng()
        # Construction is the only consumer of the generator.
        self.rng = None
        self.inputs = np.zeros(self.input_count, dtype=np.float64)
        self.hidden = np.zeros(self.hidden_count, dtype=np.float64)
        self.outputs = np.zeros(self.output_count, dtype=np.float64)
        self.input_weights = rng.random((self.input_count, self.hidden_count))
        self.hidden_weights = rng.random((self.hidden_count, self.output_count))
        self.hidden_thresholds = _ratio_thresholds(rng, self.hidden_count)
        self.output_thresholds = _ratio_thresholds(rng, self.output_count)

    @classmethod
    def create(
        cls,
        input_count: int,
        hidden_count: int,
        output_count: int,
        rng: np.random.Generator | None = None,
        *,
        hidden_credit: str = "post_update",
    ) -> "NetworkState":
        return cls(
            input_count=int(input_count),
            hidden_count=int(hidden_count),
            output_count=int(output_count),
            rng=rng,
            hidden_credit=hidden_credit,
        )

    @property
    def topology(self) -> str:
        return f"{self.input_count}-{self.hidden_count}-{self.output_count}"

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    def set_learning_rate(self, value: float) -> float:
        """Set the learning rate if ``0 < value < 1``; return the previous rate."""

        current = self._learning_rate
        if 0.0 < value < 1.0:
            self._learning_rate = float(value)
        return current

    def load_inputs(self, values: Sequence[float]) -> None:
        if len(values) != self.input_count:
            raise ShapeMismatch("inputs", self.input_count, len(values))
        self.inputs[:] = values

    def activate(self) -> None:
        self.hidden[:] = sigmoid(self.inputs @ self.input_weights - self.hidden_thresholds)
        self.outputs[:] = sigmoid(self.hidden @ self.hidden_weights - self.output_thresholds)

    def train(self, expected: Sequence[float]) -> float:
        """Backpropagate ``expected`` against the last activation.

        Weights and thresholds are updated immediately, output unit by
        output unit. Returns the sum-of-squares error of this example.
        """

        if len(expected) != self.output_count:
            raise ShapeMismatch("expected output", self.output_count, len(expected))
        lr = self._learning_rate
        hidden = self.hidden
        hidden_deriv = sigmoid_deriv(hidden)
        sos_error = 0.0
        for o in range(self.output_count):
            output = float(self.outputs[o])
            abs_error = float(expected[o]) - output
            sos_error += abs_error**2
            output_gradient = output * (1.0 - output) * abs_error

            column = self.hidden_weights[:, o]
            if self.hidden_credit == "pre_update":
                credit = column.copy()
                column += lr * hidden * output_gradient
            else:
                column += lr * hidden * output_gradient
                credit = column
            hidden_gradient = hidden_deriv * output_gradient * credit

            self.input_weights += lr * np.outer(self.inputs, hidden_gradient)
            self.hidden_thresholds += lr * hidden_gradient * -1
            self.output_thresholds[o] += lr * output_gradient * -1
        return sos_error

    def results(self) -> List[float]:
        return [float(v) for v in self.outputs]

    def state_line(self) -> str:
        pieces = [f" IN{i + 1}: {v:2.4f}" for i, v in enumerate(self.inputs)]
        pieces.extend(f"ON{o + 1}: {v:2.4f}" for o, v in enumerate(self.outputs))
        return " | ".join(pieces)


def create_network(
    input_count: int,
    hidden_count: int,
    output_count: int,
    rng: np.random.Generator | None = None,
    *,
    hidden_credit: str = "post_update",
) -> NetworkState:
    """Build a randomly initialised :class:`NetworkState`."""

    return NetworkState.create(
        input_count, hidden_count, output_count, rng, hidden_credit=hidden_credit
    )


def set_learning_rate(net: NetworkState, rate: float) -> float:
    return net.set_learning_rate(rate)


__all__ = [
    "DEFAULT_LEARNING_RATE",
    "HIDDEN_CREDIT_MODES",
    "NetworkState",
    "create_network",
    "make_rng",
    "set_learning_rate",
]
