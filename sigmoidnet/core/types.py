"""Core typing contracts for sigmoidnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError

Array = np.ndarray


def _frozen(values: Array) -> Array:
    out = np.array(values, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out


def argmax_lowest(values: Sequence[float]) -> int:
    """Return the index of the largest entry, preferring the lowest index on ties."""

    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise ValueError("argmax of an empty sequence")
    # np.argmax already returns the first occurrence of the maximum.
    return int(np.argmax(arr))


@dataclass(frozen=True)
class LayerWeights:
    """Weights connecting one layer to the next.

    Rows are output nodes. Column 0 holds the bias weight of each output node,
    columns ``1..input_count`` hold the weights of the real inputs.
    """

    values: Array

    def __post_init__(self) -> None:
        values = _frozen(self.values)
        if values.ndim != 2 or values.shape[1] < 2 or values.shape[0] < 1:
            raise ConfigurationError(
                f"Layer weights must have shape (outputs, inputs + 1), got {values.shape}"
            )
        object.__setattr__(self, "values", values)

    @classmethod
    def from_parts(cls, bias: Sequence[float], input_weights: Array) -> "LayerWeights":
        bias_col = np.asarray(bias, dtype=np.float64).reshape(-1, 1)
        return cls(np.hstack([bias_col, np.asarray(input_weights, dtype=np.float64)]))

    @property
    def shape(self) -> Tuple[int, int]:
        return tuple(self.values.shape)  # type: ignore[return-value]

    @property
    def output_count(self) -> int:
        return int(self.values.shape[0])

    @property
    def input_count(self) -> int:
        """Number of real inputs, excluding the bias column."""

        return int(self.values.shape[1] - 1)

    @property
    def bias(self) -> Array:
        return self.values[:, 0]

    @property
    def input_weights(self) -> Array:
        return self.values[:, 1:]

    def bias_weight(self, node: int) -> float:
        return float(self.values[node, 0])

    def input_weight(self, node: int, input_index: int) -> float:
        """Weight from real input ``input_index`` (0-based) to ``node``."""

        if not 0 <= input_index < self.input_count:
            raise IndexError(f"input index {input_index} out of range")
        return float(self.values[node, input_index + 1])

    def penalty(self) -> float:
        """Sum of squared non-bias weights."""

        return float(np.sum(np.square(self.input_weights)))

    def updated(self, gradient: Array, learning_rate: float) -> "LayerWeights":
        """Return a new layer moved ``learning_rate`` against ``gradient``."""

        if gradient.shape != self.values.shape:
            raise ValueError(
                f"Gradient shape {gradient.shape} does not match weights {self.values.shape}"
            )
        return LayerWeights(self.values - learning_rate * gradient)


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    layer_dims: List[int]


@dataclass(frozen=True)
class Network:
    """Immutable snapshot of every layer's weights, input layer first."""

    layers: Tuple[LayerWeights, ...]

    def __post_init__(self) -> None:
        layers = tuple(self.layers)
        if not layers:
            raise ConfigurationError("A network needs at least one weight layer")
        for idx, (current, following) in enumerate(zip(layers[:-1], layers[1:])):
            if current.output_count != following.input_count:
                raise ConfigurationError(
                    f"Layer {idx} has {current.output_count} outputs but layer "
                    f"{idx + 1} expects {following.input_count} inputs"
                )
        object.__setattr__(self, "layers", layers)

    @classmethod
    def from_arrays(cls, arrays: Sequence[Array]) -> "Network":
        return cls(tuple(LayerWeights(a) for a in arrays))

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[LayerWeights]:
        return iter(self.layers)

    def __getitem__(self, idx: int) -> LayerWeights:
        return self.layers[idx]

    @property
    def input_size(self) -> int:
        return self.layers[0].input_count

    @property
    def output_size(self) -> int:
        return self.layers[-1].output_count

    @property
    def layer_dims(self) -> List[int]:
        return [self.input_size] + [layer.output_count for layer in self.layers]

    def describe(self) -> ModelDescription:
        return ModelDescription(layer_dims=self.layer_dims)

    def parameter_count(self) -> int:
        return int(sum(int(layer.values.size) for layer in self.layers))

    def penalty(self) -> float:
        return float(sum(layer.penalty() for layer in self.layers))

    def arrays(self) -> List[Array]:
        return [layer.values.copy() for layer in self.layers]


@dataclass(frozen=True)
class ForwardResult:
    """Per-layer sums and activations captured during one forward pass.

    ``activations[0]`` is the input with the bias value prepended; every
    hidden activation is bias-prepended as well; the final entry is the raw
    output activation vector.
    """

    sums: Tuple[Array, ...]
    activations: Tuple[Array, ...]
    prediction: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sums", tuple(_frozen(s) for s in self.sums))
        object.__setattr__(
            self, "activations", tuple(_frozen(a) for a in self.activations)
        )
        object.__setattr__(self, "prediction", argmax_lowest(self.activations[-1]))

    @property
    def output(self) -> Array:
        return self.activations[-1]


Gradients = Tuple[Array, ...]


__all__ = [
    "Array",
    "ForwardResult",
    "Gradients",
    "LayerWeights",
    "ModelDescription",
    "Network",
    "argmax_lowest",
]
