import numpy as np
import pytest

from xornet.core.network import create_network, make_rng
from xornet.training.controller import evaluate, run_epoch_set
from xornet.training.examples import xor_examples

SEEDS = range(16)


@pytest.mark.perf
def test_xor_error_drops_across_seeds():
    examples = xor_examples()
    converged = 0
    for seed in SEEDS:
        net = create_network(2, 2, 1, make_rng(seed))
        result = run_epoch_set(net, examples, 10000)
        assert np.isfinite(result.error)
        if result.error < 0.05:
            converged += 1
            assert evaluate(net, examples) == 1.0
    # Ratio thresholds can start far outside the sigmoid's active range, so
    # some seeds never leave their initial plateau.
    assert converged / len(SEEDS) >= 0.4


@pytest.mark.perf
def test_saturated_output_threshold_stays_stuck():
    examples = xor_examples()
    net = create_network(2, 2, 1, make_rng(0))
    assert net.output_thresholds[0] > 100.0
    result = run_epoch_set(net, examples, 10000)
    assert result.error == pytest.approx(0.5, abs=1e-6)
    assert evaluate(net, examples) == 0.5
