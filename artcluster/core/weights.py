"""
Category prototypes for each ART geometry.

Every prototype is immutable; learning produces a new prototype which the
category store swaps in at the winning index.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


def _frozen(array) -> np.ndarray:
    data = np.array(array, dtype=np.float64)
    data.setflags(write=False)
    return data


@dataclass(frozen=True, eq=False)
class FuzzyWeight:
    """
    Complement-coded hyperbox ``[u, 1 - v]``.

    ``lower`` and ``upper`` give the box corners in input space. Without
    complement coding the vector is a plain prototype and both corners are
    the vector itself.
    """

    vector: np.ndarray
    complement_coded: bool = True

    def __post_init__(self):
        object.__setattr__(self, "vector", _frozen(self.vector))

    @property
    def dimension(self) -> int:
        """Input-space dimension covered by this prototype."""
        if self.complement_coded:
            return int(self.vector.shape[0]) // 2
        return int(self.vector.shape[0])

    @property
    def lower(self) -> np.ndarray:
        if not self.complement_coded:
            return self.vector
        return self.vector[:self.dimension]

    @property
    def upper(self) -> np.ndarray:
        if not self.complement_coded:
            return self.vector
        return 1.0 - self.vector[self.dimension:]

    def center(self) -> np.ndarray:
        return (self.lower + self.upper) / 2.0

    def is_uncommitted(self) -> bool:
        """True for an all-ones prototype that has never seen input."""
        return bool(np.all(self.vector == 1.0))


@dataclass(frozen=True, eq=False)
class HypersphereWeight:
    """Hypersphere with centroid and radius."""

    centroid: np.ndarray
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "centroid", _frozen(self.centroid))
        object.__setattr__(self, "radius", float(self.radius))

    @property
    def dimension(self) -> int:
        return int(self.centroid.shape[0])

    def center(self) -> np.ndarray:
        return self.centroid


@dataclass(frozen=True, eq=False)
class EllipsoidWeight:
    """
    Hyperellipsoid with centroid, unit major axis and major radius.

    The major axis is all zeros until the category has absorbed a second
    distinct sample; until then the ellipsoid behaves as a hypersphere.
    """

    centroid: np.ndarray
    major_axis: np.ndarray
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "centroid", _frozen(self.centroid))
        object.__setattr__(self, "major_axis", _frozen(self.major_axis))
        object.__setattr__(self, "radius", float(self.radius))

    @property
    def dimension(self) -> int:
        return int(self.centroid.shape[0])

    @property
    def has_axis(self) -> bool:
        return bool(np.any(self.major_axis))

    def center(self) -> np.ndarray:
        return self.centroid


@dataclass(frozen=True, eq=False)
class CompositeWeight:
    """One fuzzy prototype per fusion channel."""

    channels: Tuple[FuzzyWeight, ...]

    def __post_init__(self):
        object.__setattr__(self, "channels", tuple(self.channels))

    @property
    def dimension(self) -> int:
        return sum(channel.dimension for channel in self.channels)

    def center(self) -> np.ndarray:
        return np.concatenate([channel.center() for channel in self.channels])
