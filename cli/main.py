"""Command line entry point for sigmoidnet training runs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable, List

from sigmoidnet.data import available_datasets
from sigmoidnet.reporting.logger import get_logger
from sigmoidnet.training import pipelines


def _format_result(result: pipelines.PipelineResult) -> str:
    payload = {
        "status": result.status,
        "iterations": result.iterations,
        "final_cost": result.final_cost,
        "train_accuracy": result.train_accuracy,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
        "predictions": result.predictions,
    }
    return json.dumps(payload, sort_keys=True, default=str)


def _parse_row(text: str) -> List[float]:
    try:
        return [float(part) for part in text.replace(" ", "").split(",") if part]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid feature vector: {text!r}") from exc


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument("--hidden-size", type=int, help="Nodes per hidden layer")
    parser.add_argument("--hidden-count", type=int, help="Number of hidden layers")
    parser.add_argument("--regularization", type=float, help="L2 regularization strength")
    parser.add_argument("--max-iterations", type=int, help="Iteration budget")
    parser.add_argument(
        "--predict",
        type=_parse_row,
        action="append",
        metavar="X1,X2,...",
        help="Feature vector to classify after training (repeatable)",
    )
    parser.add_argument("--run-dir", help="Directory receiving run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write a cost curve plot"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log training progress to stderr"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--list-datasets", action="store_true", help="List registered datasets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        import yaml

        return yaml.safe_load(text) or {}
    return json.loads(text)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.list_datasets:
        for name in available_datasets():
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = _load_override(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)

    model_cfg = config.setdefault("model", {})
    train_cfg = config.setdefault("train", {})
    if args.hidden_size is not None:
        model_cfg["hidden_layer_size"] = int(args.hidden_size)
    if args.hidden_count is not None:
        model_cfg["hidden_layer_count"] = int(args.hidden_count)
    if args.regularization is not None:
        model_cfg["regularization"] = float(args.regularization)
    if args.max_iterations is not None:
        train_cfg["max_iterations"] = int(args.max_iterations)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.verbose:
        train_cfg["verbose"] = True
        get_logger("sigmoidnet", level=logging.INFO)
    if args.predict:
        config["predict"] = args.predict

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
