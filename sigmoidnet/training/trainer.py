"""Deterministic full-batch training loop with an adaptive learning rate."""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ..core.errors import ConfigurationError
from ..core.initializers import init_network, make_rng
from ..core.propagation import propagate_backward, propagate_batch
from ..core.types import Array, Network
from .losses import evaluate

logger = logging.getLogger(__name__)


class TrainingStatus(str, Enum):
    """Terminal state of a training run."""

    CONVERGED = "converged"
    DIVERGED_RECOVERED = "diverged_recovered"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class TrainerConfig:
    """Hyperparameters of one training run.

    Attributes
    ----------
    hidden_layer_size:
        Number of nodes in every hidden layer.
    hidden_layer_count:
        Number of hidden layers.
    regularization:
        L2 strength applied to every non-bias weight.
    max_iterations:
        Iteration budget. Rejected candidates consume it as well.
    convergence_threshold:
        Training stops once accepted steps improve the cost by less than this.
        ``0`` disables the rule, leaving ``cost_floor`` and the budget.
    convergence_patience:
        Consecutive accepted steps that must improve by less than
        ``convergence_threshold`` before training stops.
    cost_floor:
        Training stops once the batch cost drops below this value.
    learning_rate:
        Initial step size.
    acceleration / deceleration:
        Multipliers applied to the step size after a streak of accepted
        steps and after every rejected step respectively.
    patience:
        Consecutive accepted steps that must be exceeded before accelerating.
    min_learning_rate:
        Training gives up on further progress once the rate decays below it.
    log_every:
        Callback cadence in iterations, ``0`` disables progress reporting.
    """

    hidden_layer_size: int = 4
    hidden_layer_count: int = 1
    regularization: float = 0.1
    max_iterations: int = 10000
    convergence_threshold: float = 0.0
    convergence_patience: int = 1
    cost_floor: float = 1e-3
    learning_rate: float = 1.0
    acceleration: float = 1.1
    deceleration: float = 0.5
    patience: int = 10
    min_learning_rate: float = 1e-12
    log_every: int = 100

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "TrainerConfig":
        mapping = dict(mapping or {})
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(mapping) - set(known))
        if unknown:
            raise ConfigurationError(f"Unknown trainer options: {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {}
        for name, value in mapping.items():
            caster = int if known[name].type in ("int", int) else float
            try:
                kwargs[name] = caster(value)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid value for {name}: {value!r}") from exc
        config = cls(**kwargs)
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        checks = [
            (self.hidden_layer_size >= 1, "hidden_layer_size must be at least 1"),
            (self.hidden_layer_count >= 1, "hidden_layer_count must be at least 1"),
            (self.regularization >= 0, "regularization must be non-negative"),
            (self.max_iterations >= 1, "max_iterations must be at least 1"),
            (self.convergence_threshold >= 0, "convergence_threshold must be non-negative"),
            (self.convergence_patience >= 1, "convergence_patience must be at least 1"),
            (self.cost_floor >= 0, "cost_floor must be non-negative"),
            (self.learning_rate > 0, "learning_rate must be positive"),
            (self.acceleration >= 1, "acceleration must be at least 1"),
            (0 < self.deceleration < 1, "deceleration must lie in (0, 1)"),
            (self.patience >= 1, "patience must be at least 1"),
            (self.min_learning_rate >= 0, "min_learning_rate must be non-negative"),
            (self.log_every >= 0, "log_every must be non-negative"),
        ]
        for ok, message in checks:
            if not ok:
                raise ConfigurationError(message)
        for name in ("regularization", "learning_rate", "acceleration", "deceleration"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite")


@dataclass(frozen=True)
class TrainingResult:
    """Outcome of :meth:`Trainer.run`."""

    network: Network
    status: TrainingStatus
    iterations: int
    accepted_steps: int
    rejected_steps: int
    learning_rate: float
    cost_history: Tuple[float, ...] = field(repr=False)

    @property
    def final_cost(self) -> float:
        return self.cost_history[-1]


class Trainer:
    """Drive forward/backward propagation until convergence or budget exhaustion."""

    def __init__(
        self,
        config: TrainerConfig | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.config = config or TrainerConfig()
        self.config.validate()
        self.callbacks = list(callbacks or [])

    def run(
        self,
        examples: Array,
        labels: Sequence[int] | Array,
        num_classes: int,
        rng: int | np.random.Generator | None = 0,
    ) -> TrainingResult:
        """Initialise a network for ``examples`` and train it."""

        inputs, targets = self._check_batch(examples, labels, num_classes)
        network = init_network(
            inputs.shape[1],
            self.config.hidden_layer_size,
            num_classes,
            self.config.hidden_layer_count,
            make_rng(rng),
        )
        return self.fit(network, inputs, targets)

    def fit(
        self,
        network: Network,
        examples: Array,
        labels: Sequence[int] | Array,
    ) -> TrainingResult:
        """Train starting from ``network``; the snapshot itself is never mutated."""

        inputs, targets = self._check_batch(examples, labels, network.output_size)
        if inputs.shape[1] != network.input_size:
            raise ConfigurationError(
                f"Examples have {inputs.shape[1]} features but the network expects "
                f"{network.input_size}"
            )
        cfg = self.config
        reg = cfg.regularization
        learning_rate = cfg.learning_rate

        accepted = network
        accepted_results = propagate_batch(accepted, inputs)
        accepted_cost = evaluate(accepted, accepted_results, targets, reg)
        history: List[float] = [accepted_cost]
        candidate = propagate_backward(accepted, accepted_results, targets, learning_rate, reg)

        status = TrainingStatus.EXHAUSTED
        iterations = accepted_steps = rejected_steps = streak = flat = 0

        while iterations < cfg.max_iterations:
            iterations += 1
            results = propagate_batch(candidate, inputs)
            cost = evaluate(candidate, results, targets, reg)

            if not math.isfinite(cost) or cost > accepted_cost:
                rejected_steps += 1
                streak = 0
                learning_rate *= cfg.deceleration
                logger.debug(
                    "iteration %d rejected (cost %.6g > %.6g), learning rate -> %.6g",
                    iterations,
                    cost,
                    accepted_cost,
                    learning_rate,
                )
                if learning_rate < cfg.min_learning_rate:
                    status = TrainingStatus.DIVERGED_RECOVERED
                    break
                candidate = propagate_backward(
                    accepted, accepted_results, targets, learning_rate, reg
                )
            else:
                improvement = accepted_cost - cost
                accepted, accepted_results, accepted_cost = candidate, results, cost
                history.append(cost)
                accepted_steps += 1
                flat = flat + 1 if improvement < cfg.convergence_threshold else 0
                if flat >= cfg.convergence_patience or cost < cfg.cost_floor:
                    status = TrainingStatus.CONVERGED
                    break
                streak += 1
                if streak > cfg.patience:
                    learning_rate *= cfg.acceleration
                    streak = 0
                candidate = propagate_backward(
                    accepted, accepted_results, targets, learning_rate, reg
                )

            if cfg.log_every and iterations % cfg.log_every == 0:
                self._emit(
                    iterations,
                    self._progress(accepted_cost, learning_rate, accepted_steps, rejected_steps),
                )

        logger.info(
            "training %s after %d iterations (cost %.6g, %d accepted, %d rejected)",
            status.value,
            iterations,
            accepted_cost,
            accepted_steps,
            rejected_steps,
        )
        if cfg.log_every:
            final = self._progress(accepted_cost, learning_rate, accepted_steps, rejected_steps)
            final["final"] = 1.0
            self._emit(iterations, final)

        return TrainingResult(
            network=accepted,
            status=status,
            iterations=iterations,
            accepted_steps=accepted_steps,
            rejected_steps=rejected_steps,
            learning_rate=learning_rate,
            cost_history=tuple(history),
        )

    # ------------------------------------------------------------------
    # Internal helpers

    @staticmethod
    def _check_batch(
        examples: Array, labels: Sequence[int] | Array, num_classes: int
    ) -> tuple[Array, Array]:
        inputs = np.asarray(examples, dtype=np.float64)
        if inputs.ndim != 2 or inputs.shape[0] == 0 or inputs.shape[1] == 0:
            raise ConfigurationError(
                f"Examples must form a non-empty 2-D matrix, got shape {inputs.shape}"
            )
        targets = np.asarray(labels, dtype=np.int64).reshape(-1)
        if targets.shape[0] != inputs.shape[0]:
            raise ConfigurationError(
                f"Got {inputs.shape[0]} examples but {targets.shape[0]} labels"
            )
        if num_classes < 1:
            raise ConfigurationError("At least one class is required")
        if targets.min() < 0 or targets.max() >= num_classes:
            raise ConfigurationError(f"Labels must lie in [0, {num_classes})")
        return inputs, targets

    @staticmethod
    def _progress(
        cost: float, learning_rate: float, accepted_steps: int, rejected_steps: int
    ) -> Dict[str, float]:
        return {
            "cost": float(cost),
            "learning_rate": float(learning_rate),
            "accepted_steps": float(accepted_steps),
            "rejected_steps": float(rejected_steps),
        }

    def _emit(self, step: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(step, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(step, metrics)


__all__ = ["Trainer", "TrainerConfig", "TrainingResult", "TrainingStatus"]
