"""Bidirectional mapping between opaque labels and dense class indices."""

from __future__ import annotations

from typing import Dict, Generic, Hashable, Iterable, List, Sequence, Tuple, TypeVar

import numpy as np

from .errors import UnknownLabelError
from .types import Array

LabelT = TypeVar("LabelT", bound=Hashable)


class LabelCodec(Generic[LabelT]):
    """Label vocabulary built by first-occurrence deduplication.

    The position of a label in :attr:`vocabulary` is its class index and
    defines the one-hot output encoding for the lifetime of the network.
    """

    def __init__(self, labels: Iterable[LabelT]) -> None:
        vocabulary: List[LabelT] = []
        index: Dict[LabelT, int] = {}
        for label in labels:
            if label not in index:
                index[label] = len(vocabulary)
                vocabulary.append(label)
        self._vocabulary: Tuple[LabelT, ...] = tuple(vocabulary)
        self._index = index

    @property
    def vocabulary(self) -> Tuple[LabelT, ...]:
        return self._vocabulary

    def __len__(self) -> int:
        return len(self._vocabulary)

    def __contains__(self, label: object) -> bool:
        try:
            return label in self._index
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"LabelCodec({list(self._vocabulary)!r})"

    def index_of(self, label: LabelT) -> int:
        try:
            return self._index[label]
        except KeyError as exc:
            raise UnknownLabelError(f"Unknown label: {label!r}") from exc

    def encode(self, labels: Iterable[LabelT]) -> Array:
        """Map every label to its class index."""

        return np.asarray([self.index_of(label) for label in labels], dtype=np.int64)

    def decode(self, index: int) -> LabelT:
        idx = int(index)
        if not 0 <= idx < len(self._vocabulary):
            raise IndexError(
                f"Class index {idx} outside [0, {len(self._vocabulary)})"
            )
        return self._vocabulary[idx]

    def decode_many(self, indices: Sequence[int]) -> List[LabelT]:
        return [self.decode(i) for i in indices]
