"""Random weight initialisation."""

from __future__ import annotations

import numpy as np

from .errors import ConfigurationError
from .types import LayerWeights, Network

EPSILON_INIT = 0.12


def make_rng(seed: int | np.random.Generator | None = 0) -> np.random.Generator:
    """Return an explicitly owned generator for ``seed``.

    Passing an existing generator returns it unchanged so callers can share
    one stream across several initialisations on purpose.
    """

    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def init_layer(
    input_count: int,
    output_count: int,
    rng: np.random.Generator,
    epsilon: float = EPSILON_INIT,
) -> LayerWeights:
    """Draw an ``(output_count, input_count + 1)`` matrix from ``U[-epsilon, epsilon]``."""

    if input_count < 1 or output_count < 1:
        raise ConfigurationError(
            f"Layer sizes must be positive, got inputs={input_count} outputs={output_count}"
        )
    values = rng.uniform(-epsilon, epsilon, size=(output_count, input_count + 1))
    return LayerWeights(values)


def init_network(
    input_size: int,
    hidden_size: int,
    output_size: int,
    hidden_layer_count: int,
    rng: np.random.Generator,
) -> Network:
    """Compose input->hidden, hidden->hidden and hidden->output layers.

    ``hidden_layer_count == 0`` yields a single input->output layer.
    """

    if hidden_layer_count < 0:
        raise ConfigurationError("hidden_layer_count must be non-negative")
    if hidden_layer_count == 0:
        return Network((init_layer(input_size, output_size, rng),))

    layers = [init_layer(input_size, hidden_size, rng)]
    for _ in range(hidden_layer_count - 1):
        layers.append(init_layer(hidden_size, hidden_size, rng))
    layers.append(init_layer(hidden_size, output_size, rng))
    return Network(tuple(layers))


__all__ = ["EPSILON_INIT", "init_layer", "init_network", "make_rng"]
