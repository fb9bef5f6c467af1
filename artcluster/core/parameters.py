"""
Hyperparameter value objects for the ART engines.

Parameters are frozen dataclasses: constructed once per experiment, passed
by reference to every ``learn``/``predict`` call and never mutated. Use
``replace()`` or ``with_vigilance()`` to derive a modified copy.
"""

import dataclasses
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidArgumentError


# Declared field type -> (accepted runtime types, description)
_SCALAR_TYPES = {
    float: (numbers.Real, "a number"),
    int: (numbers.Integral, "an integer"),
    Optional[int]: (numbers.Integral, "an integer or null"),
    bool: (bool, "a boolean"),
}


def _check_field_types(params: Any) -> None:
    for f in dataclasses.fields(params):
        if f.type not in _SCALAR_TYPES:
            continue
        accepted, description = _SCALAR_TYPES[f.type]
        value = getattr(params, f.name)
        if value is None and f.type == Optional[int]:
            continue
        # bool is an int subclass; only bool fields take it
        if (isinstance(value, bool) and f.type is not bool) or not isinstance(value, accepted):
            raise InvalidArgumentError(
                f"{f.name} must be {description}, got {value!r}", argument=f.name
            )


def _as_tuple(name: str, values: Any, convert: Any) -> Tuple[Any, ...]:
    try:
        return tuple(convert(v) for v in values)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"{name} must be a sequence of numbers, got {values!r}", argument=name
        ) from e


def _check_unit_interval(name: str, value: float) -> None:
    if not (0.0 <= value <= 1.0):
        raise InvalidArgumentError(f"{name} must be between 0 and 1, got {value}", argument=name)


def _check_positive(name: str, value: float) -> None:
    if not value > 0:
        raise InvalidArgumentError(f"{name} must be positive, got {value}", argument=name)


@dataclass(frozen=True)
class ARTParameters:
    """
    Parameters shared by every ART variant.

    The first group controls learning, the second group is resource and
    performance tuning that never changes which category wins.
    """

    vigilance: float = 0.75
    learning_rate: float = 1.0
    alpha: float = 0.001  # choice parameter, keeps activation finite for empty prototypes
    epsilon: float = 1e-10
    max_search_attempts: Optional[int] = None  # None searches every category

    parallelism_level: int = 1
    parallel_threshold: int = 256
    cache_size: int = 0
    enable_simd: bool = True
    sparsity_threshold: float = 0.5
    sparsity_tolerance: float = 1e-12

    def __post_init__(self):
        """Validate configuration parameters."""
        _check_field_types(self)
        _check_unit_interval("vigilance", self.vigilance)
        _check_unit_interval("learning_rate", self.learning_rate)
        _check_positive("alpha", self.alpha)
        _check_positive("epsilon", self.epsilon)
        if self.max_search_attempts is not None and self.max_search_attempts < 1:
            raise InvalidArgumentError(
                f"max_search_attempts must be at least 1, got {self.max_search_attempts}",
                argument="max_search_attempts",
            )
        if self.parallelism_level < 1:
            raise InvalidArgumentError(
                f"parallelism_level must be at least 1, got {self.parallelism_level}",
                argument="parallelism_level",
            )
        if self.parallel_threshold < 1:
            raise InvalidArgumentError(
                f"parallel_threshold must be at least 1, got {self.parallel_threshold}",
                argument="parallel_threshold",
            )
        if self.cache_size < 0:
            raise InvalidArgumentError(
                f"cache_size must be non-negative, got {self.cache_size}",
                argument="cache_size",
            )
        _check_unit_interval("sparsity_threshold", self.sparsity_threshold)
        if self.sparsity_tolerance < 0:
            raise InvalidArgumentError(
                f"sparsity_tolerance must be non-negative, got {self.sparsity_tolerance}",
                argument="sparsity_tolerance",
            )

    def replace(self, **changes: Any) -> "ARTParameters":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    def with_vigilance(self, vigilance: float) -> "ARTParameters":
        return self.replace(vigilance=vigilance)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = dataclasses.asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ARTParameters":
        """Create from dictionary representation, ignoring unknown keys."""
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass(frozen=True)
class FuzzyParameters(ARTParameters):
    """FuzzyART parameters."""

    complement_coding: bool = True


@dataclass(frozen=True)
class HypersphereParameters(ARTParameters):
    """
    HypersphereART parameters.

    ``max_radius`` is the largest radius a category may reach (r-hat);
    ``default_radius`` is the radius given to a freshly created category.
    """

    max_radius: float = 1.0
    default_radius: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        _check_positive("max_radius", self.max_radius)
        if not (0.0 <= self.default_radius < self.max_radius):
            raise InvalidArgumentError(
                f"default_radius must be in [0, max_radius), got {self.default_radius}",
                argument="default_radius",
            )


@dataclass(frozen=True)
class EllipsoidParameters(ARTParameters):
    """
    EllipsoidART parameters.

    ``mu`` is the ratio between minor and major axes; 1.0 degenerates to
    hyperspheres.
    """

    mu: float = 0.8
    max_radius: float = 1.0

    def __post_init__(self):
        super().__post_init__()
        if not (0.0 < self.mu <= 1.0):
            raise InvalidArgumentError(f"mu must be in (0, 1], got {self.mu}", argument="mu")
        _check_positive("max_radius", self.max_radius)


@dataclass(frozen=True)
class FusionParameters(ARTParameters):
    """
    FusionART parameters.

    A pattern is the concatenation of channels of width ``channel_dims``;
    per-channel activation and match scores are combined with
    ``channel_weights``.
    """

    channel_dims: Tuple[int, ...] = ()
    channel_weights: Tuple[float, ...] = ()
    enable_channel_skipping: bool = False
    complement_coding: bool = True

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "channel_dims", _as_tuple("channel_dims", self.channel_dims, int))
        object.__setattr__(
            self, "channel_weights", _as_tuple("channel_weights", self.channel_weights, float)
        )
        if len(self.channel_dims) < 2:
            raise InvalidArgumentError(
                "FusionART requires at least 2 channels", argument="channel_dims"
            )
        if any(d <= 0 for d in self.channel_dims):
            raise InvalidArgumentError(
                f"channel_dims must be positive, got {self.channel_dims}", argument="channel_dims"
            )
        if len(self.channel_weights) != len(self.channel_dims):
            raise InvalidArgumentError(
                "channel_weights and channel_dims must have the same length",
                argument="channel_weights",
            )
        if any(w < 0 for w in self.channel_weights) or sum(self.channel_weights) <= 0:
            raise InvalidArgumentError(
                f"channel_weights must be non-negative and not all zero, got {self.channel_weights}",
                argument="channel_weights",
            )

    @property
    def channel_count(self) -> int:
        return len(self.channel_dims)

    @property
    def total_dimension(self) -> int:
        return sum(self.channel_dims)

    def channel_slices(self) -> List[slice]:
        """Slices of the input vector belonging to each channel."""
        slices = []
        start = 0
        for width in self.channel_dims:
            slices.append(slice(start, start + width))
            start += width
        return slices


@dataclass(frozen=True)
class DeepARTMAPParameters:
    """
    Parameters for a stack of ART layers, ordered bottom to top.

    With ``enforce_consistency`` a lower category keeps the first upper
    category it was linked to; later disagreements are only counted.
    """

    layer_parameters: Tuple[ARTParameters, ...] = field(default_factory=tuple)
    enforce_consistency: bool = True

    def __post_init__(self):
        object.__setattr__(self, "layer_parameters", tuple(self.layer_parameters))
        if len(self.layer_parameters) < 2:
            raise InvalidArgumentError(
                "DeepARTMAP requires at least 2 layers", argument="layer_parameters"
            )
        for index, params in enumerate(self.layer_parameters):
            if not isinstance(params, ARTParameters):
                raise InvalidArgumentError(
                    f"Layer {index} parameters must be ARTParameters, got {type(params).__name__}",
                    argument="layer_parameters",
                )

    @property
    def layer_count(self) -> int:
        return len(self.layer_parameters)
