"""Regularised cross-entropy cost used by the trainer."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from ..core.types import Array, ForwardResult, Network

# Output activations are clamped into [eps, 1 - eps] before taking logs so a
# saturated sigmoid never produces an infinite cost.
ACTIVATION_EPSILON = 1e-12


def _clamp(activations: Array) -> Array:
    return np.clip(activations, ACTIVATION_EPSILON, 1.0 - ACTIVATION_EPSILON)


def example_cost(result: ForwardResult | Array, label: int) -> float:
    """Cross-entropy of one example against the one-hot target ``label``.

    ``-sum_k [k == label ? ln(a_k) : ln(1 - a_k)]``
    """

    output = result.output if isinstance(result, ForwardResult) else np.asarray(result)
    a = _clamp(np.asarray(output, dtype=np.float64))
    target = np.zeros_like(a)
    target[int(label)] = 1.0
    return float(-np.sum(np.where(target == 1.0, np.log(a), np.log(1.0 - a))))


def regularization_penalty(network: Network, regularization: float) -> float:
    """``(regularization / 2) * sum`` of squared non-bias weights."""

    return regularization / 2.0 * network.penalty()


def batch_cost(
    network: Network,
    costs: Sequence[float] | Iterable[float],
    regularization: float,
) -> float:
    """Average example cost plus the L2 penalty, both divided by the batch size."""

    values = np.asarray(list(costs), dtype=np.float64)
    if values.size == 0:
        raise ValueError("batch_cost requires at least one example cost")
    return float((values.sum() + regularization_penalty(network, regularization)) / values.size)


def evaluate(
    network: Network,
    results: Sequence[ForwardResult],
    labels: Sequence[int],
    regularization: float,
) -> float:
    """Batch cost of ``results`` computed with ``network``."""

    costs = [example_cost(result, label) for result, label in zip(results, labels)]
    return batch_cost(network, costs, regularization)


__all__ = [
    "ACTIVATION_EPSILON",
    "batch_cost",
    "evaluate",
    "example_cost",
    "regularization_penalty",
]
