"""Training loop, cost evaluation and metrics."""

from .trainer import Trainer, TrainerConfig, TrainingResult, TrainingStatus

__all__ = ["Trainer", "TrainerConfig", "TrainingResult", "TrainingStatus"]
