"""Generic CSV loader for classification data."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from ..core.errors import ConfigurationError
from .registry import LabeledDataset, register_dataset


@register_dataset("csv")
def load_csv(
    *,
    csv_path: str | Path | None = None,
    label_col: str = "label",
    feature_cols: list[str] | None = None,
) -> LabeledDataset:
    """Read numeric feature columns and one label column from ``csv_path``."""

    if csv_path is None:
        raise ConfigurationError("The csv dataset requires a csv_path option")
    path = Path(csv_path)
    df = pd.read_csv(path)
    if label_col not in df.columns:
        raise ConfigurationError(f"Label column {label_col!r} not found in CSV")
    labels = df.pop(label_col).tolist()
    if feature_cols is not None:
        missing = [col for col in feature_cols if col not in df.columns]
        if missing:
            raise ConfigurationError(f"Feature columns not found in CSV: {missing}")
        df = df[list(feature_cols)]
    try:
        X = df.to_numpy(dtype=np.float64)
    except ValueError as exc:
        raise ConfigurationError("CSV feature columns must be numeric") from exc
    return LabeledDataset(
        name="csv",
        examples=X.tolist(),
        labels=labels,
        provenance={
            "type": "csv",
            "path": str(path),
            "label_col": label_col,
            "feature_cols": list(df.columns),
        },
    )
