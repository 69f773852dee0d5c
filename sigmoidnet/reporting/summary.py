"""Deterministic summary of a training run's cost and learning-rate trajectory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

# Outcome fields copied verbatim into the summary.
OUTCOME_KEYS = ("status", "iterations", "accepted_steps", "rejected_steps", "final_cost")


def compute_auc(points: Sequence[float]) -> float:
    """Trapezoidal area under ``points`` along an implicit unit step axis."""

    if len(points) < 2:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    return float(np.sum((y[1:] + y[:-1]) / 2.0))


def _trajectory(records: Sequence[Mapping[str, object]], key: str) -> Tuple[List[int], List[float]]:
    steps: List[int] = []
    values: List[float] = []
    for record in records:
        value = record.get(key)
        if isinstance(value, (int, float)):
            steps.append(int(record.get("step", len(steps))))  # type: ignore[arg-type]
            values.append(float(value))
    return steps, values


def _cost_summary(steps: List[int], costs: List[float], tail: int) -> Dict[str, float]:
    if not costs:
        return {}
    arr = np.asarray(costs, dtype=np.float64)
    best = int(np.argmin(arr))
    first = float(arr[0])
    return {
        "first": first,
        "last": float(arr[-1]),
        "min": float(arr[best]),
        "best_step": steps[best],
        "relative_drop": (first - float(arr[-1])) / first if first > 0 else 0.0,
        "tail_auc": compute_auc(costs[-tail:]) if tail else 0.0,
    }


def _rate_summary(rates: List[float]) -> Dict[str, float]:
    if not rates:
        return {}
    arr = np.asarray(rates, dtype=np.float64)
    return {
        "min": float(arr.min()),
        "max": float(arr.max()),
        "last": float(arr[-1]),
        "changes": int(np.count_nonzero(np.diff(arr))),
    }


def summarize(
    records: Sequence[Mapping[str, object]],
    *,
    outcome: Mapping[str, object] | None = None,
    tail: int = 32,
) -> Dict[str, object]:
    """Build the summary mapping for progress ``records``.

    ``cost`` describes the accepted-cost trajectory, ``learning_rate`` how
    often the adaptive schedule moved, ``outcome`` the terminal state.
    """

    cost_steps, costs = _trajectory(records, "cost")
    _, rates = _trajectory(records, "learning_rate")
    tail_window = min(tail, len(costs))
    outcome = dict(outcome or {})
    return {
        "version": 2,
        "records": len(records),
        "tail_window": tail_window,
        "cost": _cost_summary(cost_steps, costs, tail_window),
        "learning_rate": _rate_summary(rates),
        "outcome": {key: outcome[key] for key in OUTCOME_KEYS if key in outcome},
    }


def write_summary(
    metrics_jsonl: str | Path,
    out_summary_json: str | Path,
    *,
    outcome: Mapping[str, object] | None = None,
    tail: int = 32,
) -> str:
    """Summarise the JSONL progress log at ``metrics_jsonl`` into ``out_summary_json``."""

    metrics_path = Path(metrics_jsonl)
    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    records: List[Mapping[str, object]] = []
    if metrics_path.exists():
        records = [
            json.loads(line) for line in metrics_path.read_text().splitlines() if line.strip()
        ]

    summary = summarize(records, outcome=outcome, tail=tail)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["OUTCOME_KEYS", "compute_auc", "summarize", "write_summary"]
