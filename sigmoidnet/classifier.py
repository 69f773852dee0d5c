"""Construct-and-train classifier over opaque label types."""

from __future__ import annotations

from dataclasses import replace
from typing import Generic, Hashable, Iterable, List, Mapping, Sequence, Tuple, TypeVar

import numpy as np

from .core.errors import ConfigurationError, DimensionMismatchError
from .core.labels import LabelCodec
from .core.propagation import propagate_forward
from .core.types import Array, Network
from .training.metrics import compute_metrics
from .training.trainer import Trainer, TrainerConfig, TrainingResult

LabelT = TypeVar("LabelT", bound=Hashable)


def predict_index(network: Network, example: Sequence[float]) -> int:
    """Forward-propagate ``example`` and return the winning class index."""

    return propagate_forward(network, example).prediction


def _as_examples(examples: Sequence[Sequence[float]]) -> Array:
    rows = [list(row) for row in examples]
    if not rows:
        raise ConfigurationError("At least one training example is required")
    width = len(rows[0])
    if width == 0:
        raise ConfigurationError("Training examples must have at least one feature")
    for idx, row in enumerate(rows):
        if len(row) != width:
            raise ConfigurationError(
                f"Example {idx} has {len(row)} features, expected {width}"
            )
    try:
        matrix = np.asarray(rows, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("Training features must be real numbers") from exc
    if not np.all(np.isfinite(matrix)):
        raise ConfigurationError("Training features must be finite")
    return matrix


class Classifier(Generic[LabelT]):
    """A sigmoid feed-forward classifier trained at construction time.

    Parameters
    ----------
    examples:
        Training feature vectors, all of the same length.
    labels:
        One label per example. Labels must be hashable; the set of distinct
        labels (in first-occurrence order) defines the output layer. Labels
        are compared by hash and equality, so ``1``, ``1.0`` and ``True``
        name the same class.
    seed:
        Seed (or generator) for the weight initialiser. Identical seeds give
        identical training trajectories.
    hidden_layer_size, hidden_layer_count, regularization:
        Shortcuts overriding the matching :class:`TrainerConfig` fields.
    config:
        Full hyperparameter set; defaults to :class:`TrainerConfig`.
    callbacks:
        Progress sinks receiving ``on_step(iteration, metrics)``.
    """

    def __init__(
        self,
        examples: Sequence[Sequence[float]],
        labels: Sequence[LabelT],
        seed: int | np.random.Generator | None = 0,
        hidden_layer_size: int | None = None,
        hidden_layer_count: int | None = None,
        regularization: float | None = None,
        *,
        config: TrainerConfig | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        inputs = _as_examples(examples)
        label_list = list(labels)
        if len(label_list) != inputs.shape[0]:
            raise ConfigurationError(
                f"Got {inputs.shape[0]} examples but {len(label_list)} labels"
            )

        config = config or TrainerConfig()
        overrides = {
            "hidden_layer_size": hidden_layer_size,
            "hidden_layer_count": hidden_layer_count,
            "regularization": regularization,
        }
        config = replace(config, **{k: v for k, v in overrides.items() if v is not None})
        config.validate()

        try:
            self._codec: LabelCodec[LabelT] = LabelCodec(label_list)
        except TypeError as exc:
            raise ConfigurationError(f"Labels must be hashable: {exc}") from exc
        self.config = config
        trainer = Trainer(config, callbacks=callbacks)
        self._result = trainer.run(
            inputs, self._codec.encode(label_list), len(self._codec), rng=seed
        )

    def __repr__(self) -> str:
        dims = self.network.layer_dims
        return f"<Classifier dims={dims} classes={len(self._codec)}>"

    @property
    def labels(self) -> Tuple[LabelT, ...]:
        return self._codec.vocabulary

    @property
    def network(self) -> Network:
        return self._result.network

    @property
    def training_result(self) -> TrainingResult:
        return self._result

    @property
    def input_size(self) -> int:
        return self.network.input_size

    def _check_features(self, features: Sequence[float]) -> Array:
        row = np.asarray(list(features), dtype=np.float64)
        if row.ndim != 1 or row.shape[0] != self.input_size:
            raise DimensionMismatchError(
                f"Expected {self.input_size} features, got {row.size}"
            )
        return row

    def predict(self, features: Sequence[float]) -> LabelT:
        """Return the label whose output node has the highest activation."""

        return self._codec.decode(predict_index(self.network, self._check_features(features)))

    def predict_many(self, rows: Sequence[Sequence[float]]) -> List[LabelT]:
        return [self.predict(row) for row in rows]

    def score(self, examples: Sequence[Sequence[float]], labels: Sequence[LabelT]) -> float:
        """Fraction of ``examples`` whose prediction equals the given label."""

        return self.metrics(examples, labels, names=("accuracy",))["accuracy"]

    def metrics(
        self,
        examples: Sequence[Sequence[float]],
        labels: Sequence[LabelT],
        names: Iterable[str] = ("accuracy", "macro_f1"),
    ) -> Mapping[str, float]:
        """Evaluate classification metrics of the trained network on ``examples``.

        Labels never seen during training count as misclassified.
        """

        predictions = [predict_index(self.network, self._check_features(row)) for row in examples]
        targets = [
            self._codec.index_of(label) if label in self._codec else -1 for label in labels
        ]
        return compute_metrics(names, targets, predictions, num_classes=len(self._codec))


__all__ = ["Classifier", "predict_index"]
