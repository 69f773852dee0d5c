"""Forward and backward propagation over a :class:`Network`."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .activations import sigmoid, sigmoid_gradient
from .types import Array, ForwardResult, Gradients, Network

_BIAS = np.ones(1, dtype=np.float64)


def _with_bias(activation: Array) -> Array:
    return np.concatenate([_BIAS, activation])


def propagate_forward(network: Network, example: Sequence[float]) -> ForwardResult:
    """Propagate a single example and capture every layer's sums and activations."""

    current = np.asarray(example, dtype=np.float64).reshape(-1)
    sums: List[Array] = []
    activations: List[Array] = []
    for layer in network:
        previous = _with_bias(current)
        activations.append(previous)
        z = layer.values @ previous
        sums.append(z)
        current = sigmoid(z)
    activations.append(current)
    return ForwardResult(sums=tuple(sums), activations=tuple(activations))


def propagate_batch(network: Network, examples: Array) -> List[ForwardResult]:
    """Forward-propagate every row of ``examples`` in order."""

    return [propagate_forward(network, row) for row in examples]


def output_error(result: ForwardResult, label: int) -> Array:
    """Error of the output layer: activations minus the one-hot target."""

    error = np.array(result.output, dtype=np.float64, copy=True)
    error[int(label)] -= 1.0
    return error


def layer_errors(network: Network, result: ForwardResult, label: int) -> List[Array]:
    """Error signal of every non-input layer, aligned with ``network.layers``.

    Hidden errors use the product form
    ``sigmoid_gradient(sum) * (W_next[:, 1:].T @ error_next)``.
    """

    errors: List[Array] = [np.empty(0)] * len(network)
    errors[-1] = output_error(result, label)
    for idx in reversed(range(len(network) - 1)):
        following = network[idx + 1]
        back = following.input_weights.T @ errors[idx + 1]
        errors[idx] = sigmoid_gradient(result.sums[idx]) * back
    return errors


def compute_gradients(
    network: Network,
    results: Sequence[ForwardResult],
    labels: Sequence[int],
    regularization: float,
) -> Gradients:
    """Batch-averaged, L2-regularised gradient for every layer.

    The bias column (column 0) receives no regularisation term.
    """

    count = len(results)
    if count == 0:
        raise ValueError("Cannot compute gradients for an empty batch")
    if len(labels) != count:
        raise ValueError("labels and results must have the same length")

    totals = [np.zeros(layer.shape, dtype=np.float64) for layer in network]
    for result, label in zip(results, labels):
        errors = layer_errors(network, result, int(label))
        for idx, error in enumerate(errors):
            totals[idx] += np.outer(error, result.activations[idx])

    gradients: List[Array] = []
    for layer, total in zip(network, totals):
        grad = total / count
        grad[:, 1:] += (regularization / count) * layer.input_weights
        gradients.append(grad)
    return tuple(gradients)


def apply_gradients(network: Network, gradients: Gradients, learning_rate: float) -> Network:
    """Return a brand-new network; ``network`` is left untouched."""

    if len(gradients) != len(network):
        raise ValueError("One gradient per layer is required")
    return Network(
        tuple(layer.updated(grad, learning_rate) for layer, grad in zip(network, gradients))
    )


def propagate_backward(
    network: Network,
    results: Sequence[ForwardResult],
    labels: Sequence[int],
    learning_rate: float,
    regularization: float,
) -> Network:
    """One gradient-descent step from ``network`` given its forward results."""

    gradients = compute_gradients(network, results, labels, regularization)
    return apply_gradients(network, gradients, learning_rate)


__all__ = [
    "apply_gradients",
    "compute_gradients",
    "layer_errors",
    "output_error",
    "propagate_backward",
    "propagate_batch",
    "propagate_forward",
]
