"""Training-control loops: fixed iteration sets and train-until-success."""

from __future__ import annotations

import math
from typing import Callable, Sequence

from ..core.activations import round_output
from ..core.network import NetworkState
from ..core.types import EpochResult, Outcome, ShapeMismatch, TrainOutcome
from .examples import ExampleSet

LogHook = Callable[[int, str, float], None]


def _emit(hooks: Sequence[object], iteration: int, snapshot: str, error: float) -> None:
    for hook in hooks:
        if hasattr(hook, "on_step"):
            hook.on_step(iteration, snapshot, error)  # type: ignore[attr-defined]
        elif callable(hook):
            hook(iteration, snapshot, error)


def _as_hooks(log_hook) -> list[object]:
    if log_hook is None:
        return []
    if isinstance(log_hook, (list, tuple)):
        return list(log_hook)
    return [log_hook]


def run_epoch_set(
    net: NetworkState,
    example_set: ExampleSet,
    iterations: int,
    print_every: int = 0,
    log_hook=None,
    *,
    start: int = 0,
) -> EpochResult:
    """Present ``example_set`` to ``net`` ``iterations`` times.

    Each iteration loads, activates and trains on every example in order and
    records the mean sum-of-squares error over the set. When ``print_every``
    is non-zero the hook receives ``(iteration, state_line, error)`` after
    every example of iterations divisible by it. ``start`` offsets the
    iteration index reported to hooks.

    A :class:`ShapeMismatch` aborts the whole set; before it propagates it is
    annotated with the iterations completed and the last mean error.
    """

    hooks = _as_hooks(log_hook)
    count = len(example_set)
    mean_error = 0.0
    completed = 0
    for i in range(iterations):
        index = start + i
        display = bool(hooks) and print_every != 0 and index % print_every == 0
        sos_error = 0.0
        try:
            for example in example_set:
                net.load_inputs(example.inputs)
                net.activate()
                sos = net.train(example.expected)
                sos_error += sos
                if display:
                    _emit(hooks, index, net.state_line(), sos)
        except ShapeMismatch as exc:
            exc.iterations_completed = completed
            exc.error = mean_error
            raise
        mean_error = sos_error / count if count else 0.0
        completed += 1
    return EpochResult(iterations=completed, error=mean_error)


def evaluate(net: NetworkState, example_set: ExampleSet) -> float:
    """Fraction of examples whose rounded outputs all match their labels."""

    if not example_set:
        return 0.0
    success = 0
    for example in example_set:
        net.load_inputs(example.inputs)
        net.activate()
        predicted = [round_output(v) for v in net.results()]
        wanted = [round_output(v) for v in example.expected]
        if predicted == wanted:
            success += 1
    return success / len(example_set)


def improvement(current: float, previous: float) -> float:
    """Relative change of ``current`` with respect to ``previous``."""

    if current == 0.0:
        return 0.0 if previous == 0.0 else math.inf
    return abs((current - previous) / current)


def train_until_success(
    net: NetworkState,
    example_set: ExampleSet,
    update_every: int = 0,
    log_hook=None,
    *,
    success_threshold: float = 0.9,
    error_threshold: float = 0.01,
    stagnation_window: int = 10000,
    improvement_threshold: float = 0.001,
) -> TrainOutcome:
    """Train one iteration at a time until the network solves ``example_set``.

    The run converges once the success rate exceeds ``success_threshold`` and
    the mean error drops below ``error_threshold``. It stagnates when the
    relative error improvement has not exceeded ``improvement_threshold`` for
    more than ``stagnation_window`` iterations.
    """

    iteration = 0
    last_change_at = 0
    last_error = 0.0
    while True:
        result = run_epoch_set(
            net, example_set, 1, print_every=update_every, log_hook=log_hook, start=iteration
        )
        error = result.error
        success = evaluate(net, example_set)
        if success > success_threshold and error < error_threshold:
            return TrainOutcome(
                outcome=Outcome.CONVERGED,
                iterations=iteration + 1,
                success_rate=success,
                error=error,
                last_improvement=last_change_at,
            )

        if improvement(error, last_error) > improvement_threshold:
            last_change_at = iteration
            last_error = error
        elif iteration - last_change_at > stagnation_window:
            return TrainOutcome(
                outcome=Outcome.STAGNATED,
                iterations=iteration + 1,
                success_rate=success,
                error=error,
                last_improvement=last_change_at,
            )
        iteration += 1


class TrainingController:
    """Bind a network, its example set and progress callbacks together."""

    def __init__(
        self,
        net: NetworkState,
        example_set: ExampleSet,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.net = net
        self.example_set = list(example_set)
        self.callbacks = list(callbacks or [])

    def run(self, iterations: int, print_every: int = 0) -> EpochResult:
        return run_epoch_set(
            self.net, self.example_set, iterations, print_every, self.callbacks
        )

    def evaluate(self) -> float:
        return evaluate(self.net, self.example_set)

    def train_until_success(self, update_every: int = 0, **kwargs) -> TrainOutcome:
        return train_until_success(
            self.net, self.example_set, update_every, self.callbacks, **kwargs
        )


__all__ = [
    "LogHook",
    "TrainingController",
    "evaluate",
    "improvement",
    "run_epoch_set",
    "train_until_success",
]
