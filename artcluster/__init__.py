"""ART Cluster - incremental Adaptive Resonance Theory clustering."""

__version__ = "0.1.0"

from .core import (
    ARTParameters,
    DeepARTMAPParameters,
    EllipsoidParameters,
    FusionParameters,
    FuzzyParameters,
    HypersphereParameters,
    NoMatch,
    Pattern,
    Success,
)
from .engine import (
    DeepARTMAP,
    EllipsoidART,
    FusionART,
    FuzzyART,
    HypersphereART,
    VectorizedEllipsoidART,
    VectorizedFusionART,
    VectorizedFuzzyART,
    VectorizedHypersphereART,
    create_engine,
)
from .performance import PerformanceStats

__all__ = [
    "Pattern",
    "ARTParameters",
    "FuzzyParameters",
    "HypersphereParameters",
    "EllipsoidParameters",
    "FusionParameters",
    "DeepARTMAPParameters",
    "Success",
    "NoMatch",
    "FuzzyART",
    "HypersphereART",
    "EllipsoidART",
    "FusionART",
    "VectorizedFuzzyART",
    "VectorizedHypersphereART",
    "VectorizedEllipsoidART",
    "VectorizedFusionART",
    "DeepARTMAP",
    "create_engine",
    "PerformanceStats",
    "__version__",
]
