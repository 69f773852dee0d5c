"""sigmoidnet public API."""

from .classifier import Classifier, predict_index
from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.errors import (
    ConfigurationError,
    DimensionMismatchError,
    SigmoidNetError,
    UnknownLabelError,
)
from .core.labels import LabelCodec
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer, TrainerConfig, TrainingResult, TrainingStatus

__all__ = [
    "Classifier",
    "ConfigurationError",
    "DimensionMismatchError",
    "LabelCodec",
    "SigmoidNetError",
    "Trainer",
    "TrainerConfig",
    "TrainingResult",
    "TrainingStatus",
    "UnknownLabelError",
    "activations",
    "load_preset",
    "predict_index",
    "presets",
    "run_pipeline",
    "types",
]
