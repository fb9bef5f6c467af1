"""
Immutable input patterns.

A Pattern wraps a read-only 1-D float64 array. Engines never mutate the
values they are given, so patterns can be shared freely between engines
and threads.
"""

from typing import Iterable, Iterator, Union

import numpy as np

from .errors import InvalidArgumentError


ArrayLike = Union["Pattern", np.ndarray, Iterable[float]]


class Pattern:
    """Fixed-length numeric vector used as training and prediction input."""

    __slots__ = ("_values", "_hash")

    def __init__(self, values: ArrayLike):
        if isinstance(values, Pattern):
            data = values._values
        else:
            try:
                data = np.array(values, dtype=np.float64)
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(
                    f"Pattern values must be numeric: {e}", argument="values"
                ) from e
        if data.ndim != 1:
            raise InvalidArgumentError(
                f"Pattern must be one-dimensional, got shape {data.shape}",
                argument="values",
            )
        if data.size == 0:
            raise InvalidArgumentError("Pattern cannot be empty", argument="values")
        data = data.copy()
        data.setflags(write=False)
        self._values = data
        self._hash = None

    @classmethod
    def of(cls, *values: float) -> "Pattern":
        """Create a pattern from positional values."""
        return cls(values)

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        return self._values

    @property
    def dimension(self) -> int:
        return int(self._values.shape[0])

    def __len__(self) -> int:
        return self.dimension

    def __getitem__(self, index: int) -> float:
        return float(self._values[index])

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return bool(np.array_equal(self._values, other._values, equal_nan=True))

    def __hash__(self) -> int:
        if self._hash is None:
            # NaN payloads differ bitwise; normalise so equal patterns hash equally
            normalised = np.where(np.isnan(self._values), np.nan, self._values) + 0.0
            self._hash = hash(normalised.tobytes())
        return self._hash

    def __repr__(self) -> str:
        shown = ", ".join(f"{v:.4g}" for v in self._values[:8])
        if self.dimension > 8:
            shown += ", ..."
        return f"Pattern([{shown}], dimension={self.dimension})"

    def key(self) -> bytes:
        """Byte key suitable for caching."""
        return self._values.tobytes()

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._values)))

    def sparsity(self, tolerance: float = 0.0) -> float:
        """Fraction of components whose magnitude is at most ``tolerance``."""
        return float(np.count_nonzero(np.abs(self._values) <= tolerance)) / self.dimension

    def slice(self, start: int, stop: int) -> "Pattern":
        """Return the sub-pattern ``[start, stop)``."""
        if not 0 <= start < stop <= self.dimension:
            raise InvalidArgumentError(
                f"Invalid slice [{start}, {stop}) for dimension {self.dimension}",
                argument="slice",
            )
        return Pattern(self._values[start:stop])

    def complement_coded(self) -> "Pattern":
        """Return ``[x, 1 - x]``, doubling the dimension."""
        return Pattern(np.concatenate([self._values, 1.0 - self._values]))


def as_pattern(values: ArrayLike) -> Pattern:
    """Coerce arrays and sequences to a Pattern, passing patterns through."""
    if isinstance(values, Pattern):
        return values
    return Pattern(values)
