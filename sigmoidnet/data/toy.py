"""Small built-in datasets used by presets and smoke tests."""

from __future__ import annotations

import numpy as np

from .registry import LabeledDataset, register_dataset

COLORS = {
    "White": (255, 255, 255),
    "Red": (255, 0, 0),
    "Green": (0, 255, 0),
    "Blue": (0, 0, 255),
    "Yellow": (255, 255, 0),
    "Purple": (255, 0, 255),
    "Cyan": (0, 255, 255),
    "Gray": (120, 120, 120),
    "Black": (0, 0, 0),
}


@register_dataset("xor")
def make_xor() -> LabeledDataset:
    """Logical XOR over two binary inputs."""

    examples = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
    return LabeledDataset(
        name="xor",
        examples=examples,
        labels=[0, 1, 1, 0],
        provenance={"type": "xor"},
    )


@register_dataset("colors")
def make_colors(scale: float = 255.0) -> LabeledDataset:
    """Primary/secondary RGB colours named by string labels.

    Channels are divided by ``scale`` so features land in ``[0, 1]``.
    """

    examples = [[channel / scale for channel in rgb] for rgb in COLORS.values()]
    return LabeledDataset(
        name="colors",
        examples=examples,
        labels=list(COLORS),
        provenance={"type": "colors", "scale": scale},
        feature_scale=scale,
    )


@register_dataset("blobs")
def make_blobs(
    samples_per_class: int = 5,
    spread: float = 0.05,
    seed: int = 0,
) -> LabeledDataset:
    """Three well separated 2-D clusters labelled ``"a"``, ``"b"`` and ``"c"``."""

    rng = np.random.default_rng(seed)
    centers = {"a": (0.15, 0.15), "b": (0.85, 0.15), "c": (0.5, 0.85)}
    examples = []
    labels = []
    for label, center in centers.items():
        noise = rng.uniform(-spread, spread, size=(samples_per_class, 2))
        for row in np.asarray(center) + noise:
            examples.append([float(v) for v in row])
            labels.append(label)
    return LabeledDataset(
        name="blobs",
        examples=examples,
        labels=labels,
        provenance={
            "type": "blobs",
            "samples_per_class": samples_per_class,
            "spread": spread,
            "seed": seed,
        },
    )
