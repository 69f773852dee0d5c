"""Preset-driven training runs that write metrics, summaries and manifests."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Hashable, List, Mapping

from ..classifier import Classifier
from ..core.errors import ConfigurationError
from ..data import get_dataset
from ..reporting.artifacts import write_manifest
from ..reporting.logger import LoggingCallback
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .trainer import TrainerConfig

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden_layer_size": 2, "hidden_layer_count": 1, "regularization": 0.0},
        "train": {
            "seed": 0,
            "run_dir": "runs/xor",
            "log_every": 100,
            "enable_plots": False,
        },
        "predict": [[0, 0], [0, 1], [1, 0], [1, 1]],
    },
    "colors": {
        "data": {"name": "colors", "options": {"scale": 255.0}},
        "model": {"hidden_layer_size": 6, "hidden_layer_count": 1, "regularization": 0.0},
        "train": {
            "seed": 0,
            "run_dir": "runs/colors",
            "log_every": 100,
            "enable_plots": False,
        },
        "predict": [[235, 15, 92], [35, 64, 249], [25, 15, 48], [123, 100, 130]],
    },
    "blobs": {
        "data": {"name": "blobs", "options": {"samples_per_class": 5, "seed": 0}},
        "model": {"hidden_layer_size": 4, "hidden_layer_count": 1, "regularization": 0.01},
        "train": {
            "seed": 0,
            "run_dir": "runs/blobs",
            "log_every": 100,
            "enable_plots": False,
        },
        "predict": [[0.1, 0.1], [0.9, 0.1], [0.5, 0.9]],
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None

# Keys of the "train" section consumed by the pipeline rather than the trainer.
_PIPELINE_TRAIN_KEYS = {"seed", "run_dir", "enable_plots", "summary_tail", "verbose"}


@dataclass(frozen=True)
class PipelineResult:
    """Summary returned by :func:`run_pipeline`."""

    status: str
    iterations: int
    final_cost: float
    train_accuracy: float
    run_dir: str
    metrics_path: str
    manifest_path: str
    summary_path: str
    predictions: List[Hashable] = field(default_factory=list)


def _read_preset_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ConfigurationError(f"Unsupported preset file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Preset {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = _read_preset_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise ConfigurationError(
                        f"Preset {file.name} is missing required sections: {missing_str}"
                    )
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Dict[str, Any]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return dict(file_overrides[name])
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        raise ConfigurationError(f"Unknown preset: {name}") from exc


def trainer_config(config: Mapping[str, Any]) -> TrainerConfig:
    """Merge the ``model`` and ``train`` sections into a :class:`TrainerConfig`."""

    model_cfg = dict(config.get("model", {}))
    train_cfg = {
        k: v for k, v in dict(config.get("train", {})).items() if k not in _PIPELINE_TRAIN_KEYS
    }
    overlap = set(model_cfg) & set(train_cfg)
    if overlap:
        raise ConfigurationError(
            f"Options set in both model and train sections: {', '.join(sorted(overlap))}"
        )
    return TrainerConfig.from_mapping({**model_cfg, **train_cfg})


def run_pipeline(config: Mapping[str, Any]) -> PipelineResult:
    """Train a classifier described by ``config`` and write its run artifacts."""

    for section in ("data", "model", "train"):
        if not isinstance(config.get(section), Mapping):
            raise ConfigurationError(f"Config section {section!r} is missing or not a mapping")

    data_cfg = dict(config["data"])
    train_cfg = dict(config["train"])
    if "name" not in data_cfg:
        raise ConfigurationError("data.name is required")
    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    trainer_cfg = trainer_config(config)
    seed = int(train_cfg.get("seed", 0))

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=dataset.name,
        examples=len(dataset),
        features=dataset.feature_count,
        trainer_cfg=trainer_cfg,
    )

    metrics_jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=seed)
    metrics_csv = CsvSink(run_dir / "metrics.csv")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    callbacks: List[object] = [metrics_jsonl, metrics_csv, plots]
    if train_cfg.get("verbose"):
        callbacks.append(LoggingCallback(total=trainer_cfg.max_iterations))

    try:
        classifier = Classifier(
            dataset.examples,
            dataset.labels,
            seed=seed,
            config=trainer_cfg,
            callbacks=callbacks,
        )
    finally:
        plots.close()
    result = classifier.training_result

    rows = [dataset.prepare(row) for row in config.get("predict", []) or []]
    predictions = classifier.predict_many(rows)
    train_metrics = classifier.metrics(dataset.examples, dataset.labels)
    train_accuracy = train_metrics["accuracy"]

    outcome = {
        "status": result.status.value,
        "iterations": result.iterations,
        "accepted_steps": result.accepted_steps,
        "rejected_steps": result.rejected_steps,
        "final_cost": result.final_cost,
        "learning_rate": result.learning_rate,
        "train_accuracy": train_accuracy,
        "train_macro_f1": train_metrics["macro_f1"],
        "labels": [str(label) for label in classifier.labels],
    }
    resolved = _safe_config(config, trainer_cfg)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=resolved,
        dataset_provenance=dataset.provenance,
        outcome=outcome,
        network=classifier.network,
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(
        metrics_jsonl.path, run_dir / "summary.json", outcome=outcome, tail=summary_tail
    )
    (run_dir / "config.json").write_text(json.dumps(resolved, indent=2))

    return PipelineResult(
        status=result.status.value,
        iterations=result.iterations,
        final_cost=result.final_cost,
        train_accuracy=train_accuracy,
        run_dir=str(run_dir),
        metrics_path=str(metrics_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        predictions=predictions,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _safe_config(config: Mapping[str, Any], trainer_cfg: TrainerConfig) -> Dict[str, Any]:
    copied = json.loads(json.dumps(config))
    copied["trainer"] = trainer_cfg.to_dict()
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    examples: int,
    features: int,
    trainer_cfg: TrainerConfig,
) -> None:
    print("=== sigmoidnet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Examples      : {examples}")
    print(f"Features      : {features}")
    print(f"Hidden layers : {trainer_cfg.hidden_layer_count} x {trainer_cfg.hidden_layer_size}")
    print(f"Regularization: {trainer_cfg.regularization}")
    print(f"Max iterations: {trainer_cfg.max_iterations}")
    print("======================")


__all__ = ["PipelineResult", "load_preset", "presets", "run_pipeline", "trainer_config"]
