"""Value types shared by every ART engine."""

from .errors import (
    ARTError,
    InvalidArgumentError,
    DimensionMismatchError,
    MissingConfigurationError,
    EngineClosedError,
    ConfigurationError,
    is_dimension_error,
    is_missing_configuration,
)
from .pattern import Pattern, as_pattern
from .parameters import (
    ARTParameters,
    FuzzyParameters,
    HypersphereParameters,
    EllipsoidParameters,
    FusionParameters,
    DeepARTMAPParameters,
)
from .results import ActivationResult, Success, NoMatch, DeepResult, MatchOutcome
from .weights import FuzzyWeight, HypersphereWeight, EllipsoidWeight, CompositeWeight
from .store import Category, CategoryStore

__all__ = [
    "ARTError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "MissingConfigurationError",
    "EngineClosedError",
    "ConfigurationError",
    "is_dimension_error",
    "is_missing_configuration",
    "Pattern",
    "as_pattern",
    "ARTParameters",
    "FuzzyParameters",
    "HypersphereParameters",
    "EllipsoidParameters",
    "FusionParameters",
    "DeepARTMAPParameters",
    "ActivationResult",
    "Success",
    "NoMatch",
    "DeepResult",
    "MatchOutcome",
    "FuzzyWeight",
    "HypersphereWeight",
    "EllipsoidWeight",
    "CompositeWeight",
    "Category",
    "CategoryStore",
]
