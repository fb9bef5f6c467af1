"""ART clustering engines."""

from .base import BaseART
from .algorithms import (
    ALGORITHMS,
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
from .deep import DeepARTMAP
from .geometry import GEOMETRIES, Geometry

__all__ = [
    "BaseART",
    "FuzzyART",
    "HypersphereART",
    "EllipsoidART",
    "FusionART",
    "VectorizedFuzzyART",
    "VectorizedHypersphereART",
    "VectorizedEllipsoidART",
    "VectorizedFusionART",
    "DeepARTMAP",
    "ALGORITHMS",
    "create_engine",
    "GEOMETRIES",
    "Geometry",
]
