"""Activation utilities for sigmoidnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``.

    No clamping is applied: very negative inputs saturate to exactly ``0.0``
    and very positive inputs to exactly ``1.0``.
    """

    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-np.asarray(x, dtype=np.float64)))


def sigmoid_gradient(x: Array) -> Array:
    """Return ``sigmoid(x) * (1 - sigmoid(x))``."""

    s = sigmoid(x)
    return s * (1.0 - s)
