"""
Concrete ART engines.

Each scalar engine pairs ``BaseART`` with one geometry. The ``Vectorized``
variants evaluate every category activation in a single numpy/scipy call
when ``enable_simd`` is set and the pattern is at least one register wide;
otherwise they fall back to the scalar scan. Both paths pick the same
category for the same input.
"""

from typing import Any, Dict, List, Type

from ..core.errors import InvalidArgumentError
from ..core.parameters import FusionParameters
from .base import BaseART
from .geometry import (
    EllipsoidGeometry,
    FusionGeometry,
    FuzzyGeometry,
    HypersphereGeometry,
)


class FuzzyART(BaseART):
    """FuzzyART: complement-coded hyperbox categories."""

    geometry = FuzzyGeometry()


class HypersphereART(BaseART):
    """HypersphereART: categories are balls that grow to cover their inputs."""

    geometry = HypersphereGeometry()


class EllipsoidART(BaseART):
    """EllipsoidART: hyperellipsoid categories oriented along their first two samples."""

    geometry = EllipsoidGeometry()


class FusionART(BaseART):
    """
    FusionART: one fuzzy module per input channel, fused by channel weights.

    A pattern is the concatenation of all channels in the order given by
    ``FusionParameters.channel_dims``.
    """

    geometry = FusionGeometry()

    def channel_match_scores(self, pattern: Any, index: int, params: FusionParameters) -> List[float]:
        """Per-channel match scores of ``pattern`` against category ``index``."""
        pattern, x = self._validate(pattern, params)
        return self.geometry.channel_match_scores(x, self.store.weight(index), params)


class VectorizedFuzzyART(FuzzyART):
    vectorized = True


class VectorizedHypersphereART(HypersphereART):
    vectorized = True


class VectorizedEllipsoidART(EllipsoidART):
    vectorized = True


class VectorizedFusionART(FusionART):
    vectorized = True


ALGORITHMS: Dict[str, Dict[bool, Type[BaseART]]] = {
    "fuzzy": {False: FuzzyART, True: VectorizedFuzzyART},
    "hypersphere": {False: HypersphereART, True: VectorizedHypersphereART},
    "ellipsoid": {False: EllipsoidART, True: VectorizedEllipsoidART},
    "fusion": {False: FusionART, True: VectorizedFusionART},
}


def create_engine(algorithm: str, vectorized: bool = False) -> BaseART:
    """
    Instantiate an engine by algorithm name.

    Args:
        algorithm: One of ``fuzzy``, ``hypersphere``, ``ellipsoid``, ``fusion``
        vectorized: Use the vectorized variant

    Returns:
        A new, empty engine
    """
    try:
        engine_type = ALGORITHMS[algorithm.lower()][bool(vectorized)]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown algorithm '{algorithm}', expected one of {sorted(ALGORITHMS)}",
            argument="algorithm",
        ) from None
    return engine_type()
