"""Dataset registry and loader helpers."""

# Ensure built-in datasets register themselves when the package is imported.
from . import csv_generic as _csv_generic  # noqa: F401
from . import toy as _toy  # noqa: F401
from .registry import LabeledDataset, available_datasets, get_dataset, register_dataset

__all__ = [
    "LabeledDataset",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
