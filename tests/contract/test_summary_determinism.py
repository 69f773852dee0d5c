import json
from pathlib import Path

import pytest

from sigmoidnet.reporting.summary import compute_auc, summarize, write_summary
from sigmoidnet.training import pipelines


def test_summary_outputs_are_deterministic(tmp_path):
    config = {
        "data": {"name": "blobs", "options": {"samples_per_class": 4, "seed": 123}},
        "model": {"hidden_layer_size": 3, "hidden_layer_count": 1, "regularization": 0.01},
        "train": {
            "seed": 55,
            "max_iterations": 80,
            "log_every": 8,
            "run_dir": str(tmp_path / "run_a"),
            "enable_plots": False,
        },
    }

    first = pipelines.run_pipeline(config)
    summary_a = Path(first.summary_path).read_bytes()
    metrics_a = Path(first.metrics_path).read_bytes()

    config["train"]["run_dir"] = str(tmp_path / "run_b")
    second = pipelines.run_pipeline(config)
    summary_b = Path(second.summary_path).read_bytes()
    metrics_b = Path(second.metrics_path).read_bytes()

    assert metrics_a == metrics_b
    assert summary_a == summary_b


def test_summary_describes_cost_and_learning_rate(tmp_path):
    metrics = tmp_path / "metrics.jsonl"
    lines = [
        {"step": 10, "seed": 0, "sha": "x", "cost": 4.0, "learning_rate": 1.0, "accepted_steps": 9.0},
        {"step": 20, "seed": 0, "sha": "x", "cost": 2.0, "learning_rate": 0.5, "accepted_steps": 18.0},
        {"step": 30, "seed": 0, "sha": "x", "cost": 1.0, "learning_rate": 0.5, "final": 1.0},
    ]
    metrics.write_text("\n".join(json.dumps(line) for line in lines) + "\n")
    outcome = {"status": "exhausted", "iterations": 30, "accepted_steps": 27, "labels": ["a"]}

    path = write_summary(metrics, tmp_path / "summary.json", outcome=outcome, tail=2)
    summary = json.loads(Path(path).read_text())

    assert summary["records"] == 3
    assert summary["tail_window"] == 2
    assert summary["cost"]["first"] == 4.0
    assert summary["cost"]["last"] == 1.0
    assert summary["cost"]["best_step"] == 30
    assert summary["cost"]["relative_drop"] == pytest.approx(0.75)
    assert summary["cost"]["tail_auc"] == pytest.approx(1.5)
    assert summary["learning_rate"] == {"min": 0.5, "max": 1.0, "last": 0.5, "changes": 1}
    assert summary["outcome"] == {"status": "exhausted", "iterations": 30, "accepted_steps": 27}
    assert "accepted_steps" not in summary["cost"]


def test_empty_progress_log():
    summary = summarize([])
    assert summary["records"] == 0
    assert summary["cost"] == {}
    assert summary["learning_rate"] == {}
    assert compute_auc([]) == 0.0
    assert compute_auc([2.0]) == 0.0
