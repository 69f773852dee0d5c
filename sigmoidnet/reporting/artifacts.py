"""Run manifest: what was trained, on which data, and how it ended."""

from __future__ import annotations

import json
import platform
import time
from pathlib import Path
from typing import Dict, Mapping

import numpy as np

from ..core.types import Network
from .metrics import _git_sha


def describe_network(network: Network) -> Dict[str, object]:
    """Architecture facts of a trained network, for humans reading a manifest."""

    return {
        "layer_dims": network.describe().layer_dims,
        "layer_shapes": [list(layer.shape) for layer in network],
        "parameter_count": network.parameter_count(),
        "weight_penalty": network.penalty(),
        "max_abs_weight": float(max(np.max(np.abs(layer.values)) for layer in network)),
    }


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    dataset_provenance: Mapping[str, object],
    outcome: Mapping[str, object] | None = None,
    network: Network | None = None,
) -> str:
    """Write ``manifest.json`` and return its path.

    ``outcome`` carries the training status and step counts, ``network``
    (when given) is summarised with :func:`describe_network`.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": _git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "dataset": dict(dataset_provenance),
        "outcome": dict(outcome or {}),
        "network": describe_network(network) if network is not None else {},
        "environment": {"python": platform.python_version(), "numpy": np.__version__},
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)


__all__ = ["describe_network", "write_manifest"]
