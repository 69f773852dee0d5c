import math

import numpy as np
import pytest

from sigmoidnet.core.initializers import init_network, make_rng
from sigmoidnet.core.propagation import propagate_batch
from sigmoidnet.core.types import Network
from sigmoidnet.training.losses import (
    ACTIVATION_EPSILON,
    batch_cost,
    evaluate,
    example_cost,
)


def test_example_cost_matches_cross_entropy():
    output = np.array([0.8, 0.3, 0.1])
    expected = -(math.log(0.8) + math.log(0.7) + math.log(0.9))
    assert example_cost(output, 0) == pytest.approx(expected)


def test_cost_is_non_negative():
    network = init_network(2, 3, 3, 1, make_rng(0))
    examples = np.array([[0.1, 0.2], [0.9, 0.4], [0.5, 0.5]])
    labels = [0, 1, 2]
    assert evaluate(network, propagate_batch(network, examples), labels, 0.0) >= 0.0
    assert evaluate(network, propagate_batch(network, examples), labels, 1.0) >= 0.0


def test_saturated_outputs_stay_finite():
    cost = example_cost(np.array([1.0, 0.0]), 1)
    assert math.isfinite(cost)
    assert cost == pytest.approx(-2 * math.log(ACTIVATION_EPSILON), rel=1e-3)

    saturated = Network.from_arrays([np.array([[1000.0, 0.0], [-1000.0, 0.0]])])
    results = propagate_batch(saturated, np.array([[0.5]]))
    assert math.isfinite(evaluate(saturated, results, [1], 0.0))


def test_regularisation_increases_cost():
    network = init_network(2, 3, 2, 1, make_rng(1))
    examples = np.array([[0.0, 1.0], [1.0, 0.0]])
    labels = [0, 1]
    results = propagate_batch(network, examples)
    costs = [evaluate(network, results, labels, reg) for reg in (0.0, 0.5, 2.0)]
    assert costs[0] < costs[1] < costs[2]


def test_bias_weights_are_not_penalised():
    network = Network.from_arrays(
        [np.array([[3.0, 0.0, 0.0], [-2.0, 0.0, 0.0]]), np.array([[1.5, 0.0, 0.0]])]
    )
    results = propagate_batch(network, np.array([[0.2, 0.4]]))
    assert evaluate(network, results, [0], 0.0) == evaluate(network, results, [0], 10.0)


def test_batch_cost_divides_penalty_by_batch_size():
    network = Network.from_arrays([np.array([[0.0, 2.0]])])
    assert batch_cost(network, [1.0, 3.0], 1.0) == pytest.approx((4.0 + 0.5 * 4.0) / 2)
    with pytest.raises(ValueError):
        batch_cost(network, [], 1.0)
