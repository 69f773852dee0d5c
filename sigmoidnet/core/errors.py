"""Exception hierarchy for sigmoidnet."""

from __future__ import annotations


class SigmoidNetError(Exception):
    """Base class for every error raised by sigmoidnet."""


class ConfigurationError(SigmoidNetError, ValueError):
    """Raised when training data or hyperparameters cannot build a model.

    No partially trained model is ever returned alongside this error.
    """


class DimensionMismatchError(SigmoidNetError, ValueError):
    """Raised when a feature vector does not match the input layer width."""


class UnknownLabelError(SigmoidNetError, KeyError):
    """Raised when encoding a label that was never seen during training."""


__all__ = [
    "SigmoidNetError",
    "ConfigurationError",
    "DimensionMismatchError",
    "UnknownLabelError",
]
