import itertools

import pytest

from xornet.core.network import create_network, make_rng
from xornet.core.types import ShapeMismatch

DIMS = list(itertools.product([1, 2, 3], [1, 2], [1, 2, 3]))


@pytest.mark.parametrize("inputs,hidden,outputs", DIMS)
def test_load_inputs_accepts_exact_length_only(inputs, hidden, outputs):
    net = create_network(inputs, hidden, outputs, make_rng(0))
    net.load_inputs([0.5] * inputs)
    for length in {0, inputs - 1, inputs + 1} - {inputs}:
        with pytest.raises(ShapeMismatch):
            net.load_inputs([0.5] * length)


@pytest.mark.parametrize("inputs,hidden,outputs", DIMS)
def test_train_accepts_exact_length_only(inputs, hidden, outputs):
    net = create_network(inputs, hidden, outputs, make_rng(0))
    net.load_inputs([1.0] * inputs)
    net.activate()
    assert net.train([1.0] * outputs) >= 0.0
    for length in {0, outputs - 1, outputs + 1} - {outputs}:
        with pytest.raises(ShapeMismatch) as info:
            net.train([1.0] * length)
        assert info.value.expected == outputs
        assert info.value.actual == length


def test_failed_load_leaves_inputs_untouched():
    net = create_network(2, 2, 1, make_rng(0))
    net.load_inputs([0.25, 0.75])
    with pytest.raises(ShapeMismatch):
        net.load_inputs([1.0, 1.0, 1.0])
    assert net.inputs.tolist() == [0.25, 0.75]


def test_shape_mismatch_is_a_value_error():
    net = create_network(2, 2, 1, make_rng(0))
    with pytest.raises(ValueError, match="wanted 2 values but have 1"):
        net.load_inputs([1.0])
