"""Tests for parameter dataclasses and the error taxonomy."""

import dataclasses

import numpy as np
import pytest

from artcluster.core import (
    ARTParameters,
    DeepARTMAPParameters,
    DimensionMismatchError,
    EllipsoidParameters,
    FusionParameters,
    FuzzyParameters,
    HypersphereParameters,
    InvalidArgumentError,
    MissingConfigurationError,
    is_dimension_error,
    is_missing_configuration,
)


class TestARTParameters:
    """Shared parameters."""

    def test_defaults(self):
        """Test default parameter values."""
        params = ARTParameters()

        assert params.vigilance == 0.75
        assert params.learning_rate == 1.0
        assert params.alpha == 0.001
        assert params.max_search_attempts is None
        assert params.parallelism_level == 1
        assert params.cache_size == 0
        assert params.enable_simd is True

    def test_frozen(self):
        """Test that parameters cannot be mutated."""
        params = FuzzyParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.vigilance = 0.1

    @pytest.mark.parametrize("field_name,value", [
        ("vigilance", -0.1),
        ("vigilance", 1.1),
        ("learning_rate", 2.0),
        ("alpha", 0.0),
        ("epsilon", -1.0),
        ("max_search_attempts", 0),
        ("parallelism_level", 0),
        ("parallel_threshold", 0),
        ("cache_size", -1),
        ("sparsity_threshold", 1.5),
    ])
    def test_invalid_values_name_the_field(self, field_name, value):
        """Test that out-of-range values name the offending field."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            FuzzyParameters(**{field_name: value})

        assert exc_info.value.argument == field_name
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("field_name,value", [
        ("vigilance", "high"),
        ("learning_rate", None),
        ("alpha", [0.1]),
        ("max_search_attempts", 2.5),
        ("parallelism_level", "4"),
        ("cache_size", True),
        ("enable_simd", "yes"),
        ("complement_coding", 1),
    ])
    def test_wrong_types_name_the_field(self, field_name, value):
        """Test that non-numeric or mistyped values raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            FuzzyParameters(**{field_name: value})

        assert exc_info.value.argument == field_name

    def test_numpy_scalars_are_accepted(self):
        """Test that numpy scalars pass the type checks."""
        params = FuzzyParameters(vigilance=np.float64(0.4), parallelism_level=np.int64(2))

        assert params.vigilance == 0.4
        assert params.parallelism_level == 2

    def test_integers_are_accepted_for_float_fields(self):
        """Test that integer literals are valid for float fields."""
        assert FuzzyParameters(vigilance=1, learning_rate=0).learning_rate == 0

    def test_with_vigilance_returns_copy(self):
        """Test deriving a copy with another vigilance."""
        params = FuzzyParameters(vigilance=0.5, complement_coding=False)
        stricter = params.with_vigilance(0.9)

        assert stricter.vigilance == 0.9
        assert stricter.complement_coding is False
        assert params.vigilance == 0.5
        assert isinstance(stricter, FuzzyParameters)

    def test_dict_round_trip_ignores_unknown_keys(self):
        """Test dictionary conversion with unknown keys."""
        params = HypersphereParameters(vigilance=0.6, max_radius=2.0)
        data = params.to_dict()
        data["unknown"] = 1

        assert HypersphereParameters.from_dict(data) == params


class TestVariantParameters:
    """Geometry-specific parameters."""

    def test_hypersphere_default_radius_bounds(self):
        """Test the default radius range."""
        with pytest.raises(InvalidArgumentError):
            HypersphereParameters(max_radius=1.0, default_radius=1.0)
        assert HypersphereParameters(default_radius=0.5).default_radius == 0.5

    def test_ellipsoid_mu_bounds(self):
        """Test the axis ratio range."""
        with pytest.raises(InvalidArgumentError):
            EllipsoidParameters(mu=0.0)
        assert EllipsoidParameters(mu=1.0).mu == 1.0

    def test_fusion_channels(self):
        """Test channel widths, weights and slices."""
        params = FusionParameters(channel_dims=[2, 3], channel_weights=[1, 3])

        assert params.channel_dims == (2, 3)
        assert params.channel_weights == (1.0, 3.0)
        assert params.total_dimension == 5
        assert params.channel_count == 2
        assert params.channel_slices() == [slice(0, 2), slice(2, 5)]

    @pytest.mark.parametrize("dims,weights", [
        ((4,), (1.0,)),
        ((4, 4), (1.0,)),
        ((4, 0), (1.0, 1.0)),
        ((4, 4), (-1.0, 2.0)),
        ((4, 4), (0.0, 0.0)),
    ])
    def test_fusion_invalid_channels(self, dims, weights):
        """Test rejection of inconsistent channel settings."""
        with pytest.raises(InvalidArgumentError):
            FusionParameters(channel_dims=dims, channel_weights=weights)

    @pytest.mark.parametrize("dims,weights", [
        (("a", "b"), (1.0, 1.0)),
        ((4, 4), ("heavy", 1.0)),
        (4, (1.0, 1.0)),
    ])
    def test_fusion_non_numeric_channels(self, dims, weights):
        """Test that non-numeric channel settings raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError):
            FusionParameters(channel_dims=dims, channel_weights=weights)

    def test_deep_requires_two_layers(self):
        """Test that a stack needs two layer parameters."""
        with pytest.raises(InvalidArgumentError):
            DeepARTMAPParameters(layer_parameters=[FuzzyParameters()])
        with pytest.raises(InvalidArgumentError):
            DeepARTMAPParameters(layer_parameters=[FuzzyParameters(), "fuzzy"])

        params = DeepARTMAPParameters(layer_parameters=[FuzzyParameters(), FuzzyParameters()])
        assert params.layer_count == 2
        assert params.enforce_consistency is True


class TestErrorTaxonomy:
    """Error hierarchy and helper predicates."""

    def test_dimension_mismatch_is_invalid_argument(self):
        """Test the dimension mismatch error."""
        error = DimensionMismatchError(3, 2)

        assert isinstance(error, InvalidArgumentError)
        assert error.expected == 3
        assert error.actual == 2
        assert error.details["expected"] == 3
        assert is_dimension_error(error)
        assert not is_dimension_error(InvalidArgumentError("x"))

    def test_missing_configuration_is_distinct(self):
        """Test that missing configuration is its own error kind."""
        error = MissingConfigurationError()

        assert isinstance(error, TypeError)
        assert not isinstance(error, InvalidArgumentError)
        assert is_missing_configuration(error)
        assert "None" in error.message
