"""Classification metric helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Sequence

import numpy as np

from ..core.types import Array


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def _indices(values: Sequence[int] | Array) -> Array:
    return np.asarray(values, dtype=np.int64).reshape(-1)


def accuracy(targets: Sequence[int] | Array, predictions: Sequence[int] | Array) -> float:
    targ = _indices(targets)
    pred = _indices(predictions)
    if targ.shape != pred.shape:
        raise ValueError("targets and predictions must have the same length")
    if targ.size == 0:
        return 0.0
    return float(np.mean(targ == pred))


def confusion_matrix(
    targets: Sequence[int] | Array,
    predictions: Sequence[int] | Array,
    num_classes: int,
) -> Array:
    """Rows are true classes, columns are predicted classes."""

    matrix = np.zeros((num_classes, num_classes), dtype=np.int64)
    for t, p in zip(_indices(targets), _indices(predictions)):
        matrix[t, p] += 1
    return matrix


def macro_f1(
    targets: Sequence[int] | Array,
    predictions: Sequence[int] | Array,
    num_classes: int,
) -> float:
    targ_idx = _indices(targets)
    pred_idx = _indices(predictions)
    f1_scores = []
    for cls in range(num_classes):
        tp = np.sum((pred_idx == cls) & (targ_idx == cls))
        fp = np.sum((pred_idx == cls) & (targ_idx != cls))
        fn = np.sum((pred_idx != cls) & (targ_idx == cls))
        precision = tp / (tp + fp + 1e-9)
        recall = tp / (tp + fn + 1e-9)
        f1 = 2 * precision * recall / (precision + recall + 1e-9)
        f1_scores.append(f1)
    return float(np.mean(f1_scores)) if f1_scores else 0.0


def compute_metric(
    name: str,
    targets: Sequence[int] | Array,
    predictions: Sequence[int] | Array,
    *,
    num_classes: int,
) -> MetricResult:
    key = name.lower()
    if key == "accuracy":
        value = accuracy(targets, predictions)
    elif key == "macro_f1":
        value = macro_f1(targets, predictions, num_classes)
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str],
    targets: Sequence[int] | Array,
    predictions: Sequence[int] | Array,
    *,
    num_classes: int,
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, targets, predictions, num_classes=num_classes)
        results[metric.name] = metric.value
    return results


__all__ = [
    "MetricResult",
    "accuracy",
    "compute_metrics",
    "confusion_matrix",
    "macro_f1",
]
