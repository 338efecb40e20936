"""Training loops and run orchestration for XorNet."""

from .controller import TrainingController, evaluate, run_epoch_set, train_until_success
from .examples import make_examples, xor_examples

__all__ = [
    "TrainingController",
    "evaluate",
    "make_examples",
    "run_epoch_set",
    "train_until_success",
    "xor_examples",
]
