"""XorNet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.network import (
    DEFAULT_LEARNING_RATE,
    NetworkState,
    create_network,
    make_rng,
    set_learning_rate,
)
from .core.types import STAGNATED, Example, Outcome, ShapeMismatch, TrainOutcome
from .training.controller import (
    TrainingController,
    evaluate,
    run_epoch_set,
    train_until_success,
)
from .training.examples import make_examples, xor_examples
from .training.pipelines import load_preset, parse_topology, presets, run_pipeline

__all__ = [
    "DEFAULT_LEARNING_RATE",
    "Example",
    "NetworkState",
    "Outcome",
    "STAGNATED",
    "ShapeMismatch",
    "TrainOutcome",
    "TrainingController",
    "activations",
    "create_network",
    "evaluate",
    "load_preset",
    "make_examples",
    "make_rng",
    "parse_topology",
    "presets",
    "run_epoch_set",
    "run_pipeline",
    "set_learning_rate",
    "train_until_success",
    "types",
    "xor_examples",
]
