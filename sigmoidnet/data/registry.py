"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, MutableMapping

from ..core.errors import ConfigurationError


@dataclass(frozen=True)
class LabeledDataset:
    """In-memory labelled training data.

    Attributes
    ----------
    name:
        Registry identifier the dataset was built from.
    examples:
        Feature vectors, one per example.
    labels:
        Opaque labels, one per example.
    provenance:
        Free-form metadata recorded in run manifests.
    feature_scale:
        Divisor already applied to every raw feature of :attr:`examples`.
    """

    name: str
    examples: List[List[float]]
    labels: List[Hashable]
    provenance: Dict[str, Any] = field(default_factory=dict)
    feature_scale: float = 1.0

    def prepare(self, row: Iterable[float]) -> List[float]:
        """Bring a raw feature vector onto the scale of :attr:`examples`."""

        return [float(value) / self.feature_scale for value in row]

    @property
    def feature_count(self) -> int:
        return len(self.examples[0]) if self.examples else 0

    def __len__(self) -> int:
        return len(self.examples)


DatasetFactory = Callable[..., LabeledDataset]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    return _decorator


def get_dataset(name: str, /, **options: Any) -> LabeledDataset:
    """Build the dataset registered as ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise ConfigurationError(f"Unknown dataset {name!r}. Available datasets: {available}")
    try:
        dataset = _REGISTRY[name](**options)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid options for dataset {name!r}: {exc}") from exc
    _validate(dataset)
    return dataset


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate(dataset: LabeledDataset) -> None:
    if len(dataset.examples) != len(dataset.labels):
        raise ConfigurationError(
            f"Dataset {dataset.name!r} has {len(dataset.examples)} examples but "
            f"{len(dataset.labels)} labels"
        )


__all__ = [
    "LabeledDataset",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
