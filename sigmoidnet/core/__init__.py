"""Core numerical primitives for sigmoidnet."""

from . import activations, errors, initializers, labels, propagation, types

__all__ = ["activations", "errors", "initializers", "labels", "propagation", "types"]
