import math

import numpy as np
import pytest

from xornet.core.activations import round_output, sigmoid
from xornet.core.network import (
    DEFAULT_LEARNING_RATE,
    NetworkState,
    create_network,
    make_rng,
    set_learning_rate,
)


def _reference_train(net: NetworkState, expected):
    """Element-by-element backpropagation over plain Python lists."""

    lr = net.learning_rate
    inputs = net.inputs.tolist()
    hidden = net.hidden.tolist()
    outputs = net.outputs.tolist()
    iw = net.input_weights.tolist()
    hw = net.hidden_weights.tolist()
    ht = net.hidden_thresholds.tolist()
    ot = net.output_thresholds.tolist()
    sos = 0.0
    for o in range(len(outputs)):
        abs_error = expected[o] - outputs[o]
        sos += abs_error**2
        og = outputs[o] * (1.0 - outputs[o]) * abs_error
        for h in range(len(hidden)):
            hw[h][o] += lr * hidden[h] * og
            hg = hidden[h] * (1 - hidden[h]) * og * hw[h][o]
            for i in range(len(inputs)):
                iw[i][h] += lr * inputs[i] * hg
            ht[h] += lr * hg * -1
        ot[o] += lr * og * -1
    return sos, iw, hw, ht, ot


def test_construction_shapes_and_ranges():
    net = create_network(3, 4, 2, make_rng(0))
    assert net.inputs.shape == (3,)
    assert net.hidden.shape == (4,)
    assert net.outputs.shape == (2,)
    assert net.input_weights.shape == (3, 4)
    assert net.hidden_weights.shape == (4, 2)
    assert net.hidden_thresholds.shape == (4,)
    assert net.output_thresholds.shape == (2,)
    assert np.all((net.input_weights >= 0.0) & (net.input_weights < 1.0))
    assert np.all((net.hidden_weights >= 0.0) & (net.hidden_weights < 1.0))
    assert np.all(net.hidden_thresholds > 0.0)
    assert net.learning_rate == DEFAULT_LEARNING_RATE
    assert net.topology == "3-4-2"


def test_thresholds_are_ratio_of_uniform_draws():
    rng = make_rng(5)
    net = create_network(2, 2, 1, rng)
    replay = make_rng(5)
    replay.random((2, 2))
    replay.random((2, 1))
    expected_hidden = replay.random(2) / replay.random(2)
    expected_output = replay.random(1) / replay.random(1)
    np.testing.assert_allclose(net.hidden_thresholds, expected_hidden)
    np.testing.assert_allclose(net.output_thresholds, expected_output)


def test_same_seed_gives_same_weights():
    a = create_network(2, 3, 1, make_rng(42))
    b = create_network(2, 3, 1, make_rng(42))
    np.testing.assert_array_equal(a.input_weights, b.input_weights)
    np.testing.assert_array_equal(a.hidden_thresholds, b.hidden_thresholds)
    c = create_network(2, 3, 1, make_rng(43))
    assert not np.array_equal(a.input_weights, c.input_weights)


def test_unseeded_networks_differ():
    a = create_network(4, 4, 1)
    b = create_network(4, 4, 1)
    assert not np.array_equal(a.input_weights, b.input_weights)


@pytest.mark.parametrize("dims", [(0, 2, 1), (2, 0, 1), (2, 2, 0)])
def test_counts_must_be_positive(dims):
    with pytest.raises(ValueError):
        create_network(*dims)


def test_activate_matches_formula():
    net = create_network(2, 2, 1, make_rng(1))
    net.load_inputs([1.0, 0.0])
    net.activate()
    for h in range(2):
        weighted = sum(net.input_weights[i][h] * net.inputs[i] for i in range(2))
        weighted -= net.hidden_thresholds[h]
        assert net.hidden[h] == pytest.approx(1.0 / (1.0 + math.exp(-weighted)))
    weighted = sum(net.hidden_weights[h][0] * net.hidden[h] for h in range(2))
    weighted -= net.output_thresholds[0]
    assert net.results()[0] == pytest.approx(1.0 / (1.0 + math.exp(-weighted)))


def test_activation_is_deterministic():
    net = create_network(2, 3, 2, make_rng(9))
    net.load_inputs([0.25, 0.75])
    net.activate()
    first = net.results()
    for _ in range(5):
        net.activate()
        assert net.results() == first


def test_train_matches_reference_update_order():
    net = create_network(2, 3, 2, make_rng(3))
    for inputs, expected in [([0, 1], [1, 0]), ([1, 1], [0, 1]), ([1, 0], [1, 1])]:
        net.load_inputs(inputs)
        net.activate()
        sos, iw, hw, ht, ot = _reference_train(net, expected)
        assert net.train(expected) == pytest.approx(sos)
        np.testing.assert_allclose(net.input_weights, iw)
        np.testing.assert_allclose(net.hidden_weights, hw)
        np.testing.assert_allclose(net.hidden_thresholds, ht)
        np.testing.assert_allclose(net.output_thresholds, ot)


def test_pre_update_credit_uses_old_weight():
    post = create_network(2, 2, 1, make_rng(11))
    pre = create_network(2, 2, 1, make_rng(11), hidden_credit="pre_update")
    for net in (post, pre):
        net.load_inputs([1.0, 1.0])
        net.activate()
    old_weights = pre.hidden_weights[:, 0].copy()
    assert post.train([0.0]) == pytest.approx(pre.train([0.0]))
    np.testing.assert_allclose(post.hidden_weights, pre.hidden_weights)
    np.testing.assert_allclose(post.output_thresholds, pre.output_thresholds)
    assert not np.allclose(post.input_weights, pre.input_weights)

    output = float(pre.outputs[0])
    og = output * (1 - output) * (0.0 - output)
    hg = pre.hidden * (1 - pre.hidden) * og * old_weights
    fresh = create_network(2, 2, 1, make_rng(11))
    np.testing.assert_allclose(
        pre.input_weights, fresh.input_weights + pre.learning_rate * np.outer([1.0, 1.0], hg)
    )


def test_unknown_hidden_credit_mode():
    with pytest.raises(ValueError):
        create_network(2, 2, 1, hidden_credit="sideways")


def test_train_returns_sum_of_squares():
    net = create_network(2, 2, 3, make_rng(2))
    net.load_inputs([0, 1])
    net.activate()
    outputs = net.results()
    expected = [1.0, 0.0, 1.0]
    sos = net.train(expected)
    assert sos == pytest.approx(sum((e - o) ** 2 for e, o in zip(expected, outputs)))
    assert sos >= 0.0


def test_results_is_a_copy():
    net = create_network(2, 2, 1, make_rng(0))
    net.load_inputs([1, 0])
    net.activate()
    out = net.results()
    out[0] = 123.0
    assert net.results()[0] != 123.0


def test_learning_rate_setter_bounds():
    net = create_network(2, 2, 1, make_rng(0))
    assert net.set_learning_rate(0.5) == DEFAULT_LEARNING_RATE
    assert net.learning_rate == 0.5
    for rejected in (0.0, 1.0, -0.3, 2.0, float("nan")):
        assert net.set_learning_rate(rejected) == 0.5
        assert net.learning_rate == 0.5
    assert set_learning_rate(net, 0.1) == 0.5
    assert net.learning_rate == 0.1


def test_state_line_format():
    net = create_network(2, 2, 1, make_rng(0))
    net.load_inputs([0, 1])
    net.activate()
    line = net.state_line()
    assert line.startswith(" IN1: 0.0000 |  IN2: 1.0000 | ON1: ")
    assert line.endswith(f"{net.results()[0]:2.4f}")


def test_networks_compare_by_identity():
    net = create_network(2, 2, 1, make_rng(0))
    assert net == net
    assert net != create_network(2, 2, 1, make_rng(0))


def test_sigmoid_and_rounding():
    assert sigmoid(np.array([0.0]))[0] == pytest.approx(0.5)
    assert sigmoid(np.array([-1000.0]))[0] == pytest.approx(0.0)
    assert round_output(0.5) == 1
    assert round_output(0.4999) == 0
    assert round_output(0.0) == 0
    assert round_output(1.0) == 1
