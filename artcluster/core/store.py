"""
Append-only category storage.

Categories are addressed by their insertion index, which never changes:
the store only grows, and learning replaces the prototype at an index in
place. Every mutation bumps ``revision`` so derived data (prediction
caches, stacked weight matrices) can detect staleness.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .errors import DimensionMismatchError


@dataclass(frozen=True)
class Category:
    """A learned prototype and the number of times it has been updated."""

    index: int
    weight: Any
    update_count: int = 0


class CategoryStore:
    """Ordered, index-stable collection of categories."""

    def __init__(self):
        self._weights: List[Any] = []
        self._update_counts: List[int] = []
        self._expected_dimension: Optional[int] = None
        self._revision = 0
        self._derived: Dict[str, Tuple[int, Any]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._weights)

    def __iter__(self) -> Iterator[Category]:
        return iter(self.categories())

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def expected_dimension(self) -> Optional[int]:
        """Input dimension fixed by the first pattern; ``None`` while empty."""
        return self._expected_dimension

    def check_dimension(self, dimension: int) -> None:
        """Raise DimensionMismatchError unless ``dimension`` is acceptable."""
        if self._expected_dimension is not None and dimension != self._expected_dimension:
            raise DimensionMismatchError(self._expected_dimension, dimension)

    def fix_dimension(self, dimension: int) -> None:
        with self._lock:
            self.check_dimension(dimension)
            self._expected_dimension = dimension

    def weights(self) -> List[Any]:
        return list(self._weights)

    def weight(self, index: int) -> Any:
        self._check_index(index)
        return self._weights[index]

    def update_count(self, index: int) -> int:
        self._check_index(index)
        return self._update_counts[index]

    def update_counts(self) -> List[int]:
        return list(self._update_counts)

    def categories(self) -> List[Category]:
        return [
            Category(index=i, weight=w, update_count=c)
            for i, (w, c) in enumerate(zip(self._weights, self._update_counts))
        ]

    def append(self, weight: Any) -> int:
        """Add a new category and return its index."""
        with self._lock:
            self._weights.append(weight)
            self._update_counts.append(0)
            self._revision += 1
            return len(self._weights) - 1

    def replace(self, index: int, weight: Any) -> None:
        """Swap in an updated prototype and count the update."""
        with self._lock:
            self._check_index(index)
            self._weights[index] = weight
            self._update_counts[index] += 1
            self._revision += 1

    def derived(self, key: str, builder: Callable[[List[Any]], Any]) -> Any:
        """
        Return data computed from the current weights, rebuilding it only
        when the store has changed since it was last built.
        """
        with self._lock:
            cached = self._derived.get(key)
            if cached is not None and cached[0] == self._revision:
                return cached[1]
            value = builder(self._weights)
            self._derived[key] = (self._revision, value)
            return value

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._weights):
            raise IndexError(
                f"Category index {index} out of bounds for {len(self._weights)} categories"
            )
