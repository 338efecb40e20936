"""Example sets presented to the network during training."""

from __future__ import annotations

import itertools
from typing import Iterable, List, Sequence, Tuple

from ..core.types import Example, ShapeMismatch

ExampleSet = Sequence[Example]

XOR_PAIRS: Tuple[Tuple[Tuple[float, float], Tuple[float]], ...] = (
    ((0.0, 0.0), (0.0,)),
    ((0.0, 1.0), (1.0,)),
    ((1.0, 0.0), (1.0,)),
    ((1.0, 1.0), (0.0,)),
)


def make_examples(
    pairs: Iterable[Example | Tuple[Sequence[float], Sequence[float]]],
) -> List[Example]:
    """Normalise ``(inputs, expected)`` pairs into :class:`Example` objects."""

    examples: List[Example] = []
    for item in pairs:
        if isinstance(item, Example):
            examples.append(item)
        else:
            inputs, expected = item
            examples.append(Example.of(inputs, expected))
    return examples


def xor_examples() -> List[Example]:
    """The four boolean combinations of two inputs labelled with XOR."""

    return make_examples(XOR_PAIRS)


def truth_table(arity: int, fn) -> List[Example]:
    """Label every boolean input vector of length ``arity`` with ``fn``."""

    examples: List[Example] = []
    for bits in itertools.product((0.0, 1.0), repeat=arity):
        label = fn(*(int(b) for b in bits))
        examples.append(Example.of(bits, (float(label),)))
    return examples


def check_examples(examples: ExampleSet, input_count: int, output_count: int) -> None:
    """Raise :class:`ShapeMismatch` for the first example that does not fit."""

    for example in examples:
        if len(example.inputs) != input_count:
            raise ShapeMismatch("inputs", input_count, len(example.inputs))
        if len(example.expected) != output_count:
            raise ShapeMismatch("expected output", output_count, len(example.expected))


__all__ = [
    "ExampleSet",
    "XOR_PAIRS",
    "check_examples",
    "make_examples",
    "truth_table",
    "xor_examples",
]
