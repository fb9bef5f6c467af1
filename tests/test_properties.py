"""
Behavioural properties shared by every single-layer engine.
"""

import numpy as np
import pytest

from artcluster import (
    EllipsoidART,
    EllipsoidParameters,
    FusionART,
    FusionParameters,
    FuzzyART,
    FuzzyParameters,
    HypersphereART,
    HypersphereParameters,
    VectorizedFuzzyART,
    VectorizedHypersphereART,
)


# Six points along the diagonal, (0.1, 0.1) to (0.6, 0.6)
DIAGONAL = np.array([[v, v] for v in (0.1, 0.2, 0.3, 0.4, 0.5, 0.6)])


def fusion_parameters(**kwargs):
    return FusionParameters(channel_dims=(1, 1), channel_weights=(0.5, 0.5), **kwargs)


ENGINES = [
    pytest.param(FuzzyART, FuzzyParameters, id="fuzzy"),
    pytest.param(HypersphereART, HypersphereParameters, id="hypersphere"),
    pytest.param(EllipsoidART, EllipsoidParameters, id="ellipsoid"),
    pytest.param(FusionART, fusion_parameters, id="fusion"),
    pytest.param(VectorizedFuzzyART, FuzzyParameters, id="vectorized-fuzzy"),
    pytest.param(VectorizedHypersphereART, HypersphereParameters, id="vectorized-hypersphere"),
]


def category_count(engine_type, make_params, data, vigilance):
    with engine_type() as engine:
        engine.fit(data, make_params(vigilance=vigilance))
        return engine.get_category_count()


@pytest.fixture
def separation_data(rng):
    """Two tight groups followed by uniform noise."""
    near_low = np.array([0.1, 0.1]) + rng.uniform(-0.01, 0.01, size=(5, 2))
    near_high = np.array([0.8, 0.9]) + rng.uniform(-0.01, 0.01, size=(5, 2))
    noise = rng.uniform(0.0, 1.0, size=(5, 2))
    return np.vstack([near_low, near_high, noise])


@pytest.mark.parametrize("engine_type,make_params", ENGINES)
class TestVigilanceMonotonicity:
    """Raising vigilance never yields fewer categories on the diagonal sequence."""

    def test_low_vigilance_groups_diagonal(self, engine_type, make_params):
        """Test that vigilance 0.3 needs at most three categories."""
        assert category_count(engine_type, make_params, DIAGONAL, 0.3) <= 3

    def test_high_vigilance_splits_diagonal(self, engine_type, make_params):
        """Test that vigilance 0.95 needs at least four categories."""
        assert category_count(engine_type, make_params, DIAGONAL, 0.95) >= 4

    def test_counts_follow_vigilance(self, engine_type, make_params):
        """Test that the low-vigilance count does not exceed the high-vigilance count."""
        low = category_count(engine_type, make_params, DIAGONAL, 0.3)
        high = category_count(engine_type, make_params, DIAGONAL, 0.95)

        assert low <= high


@pytest.mark.parametrize("engine_type,make_params", ENGINES)
class TestClusterSeparation:
    """Tight groups collapse without swallowing the whole input."""

    def test_category_count_in_range(self, engine_type, make_params, separation_data):
        """Test that vigilance 0.8 gives between 2 and 10 categories."""
        count = category_count(engine_type, make_params, separation_data, 0.8)

        assert 2 <= count <= 10

    def test_groups_keep_distinct_labels(self, engine_type, make_params, separation_data):
        """Test that each tight group shares one label and the two labels differ."""
        with engine_type() as engine:
            labels = engine.fit_predict(separation_data, make_params(vigilance=0.8))

        assert len(set(labels[:5])) == 1
        assert len(set(labels[5:10])) == 1
        assert labels[0] != labels[5]

    def test_count_never_decreases(self, engine_type, make_params, separation_data):
        """Test that categories are only ever added while learning."""
        params = make_params(vigilance=0.8)
        previous = 0
        with engine_type() as engine:
            for row in separation_data:
                engine.learn(row, params)
                assert engine.get_category_count() >= previous
                previous = engine.get_category_count()

    def test_predict_is_idempotent(self, engine_type, make_params, separation_data):
        """Test that repeated predictions agree and leave the engine unchanged."""
        params = make_params(vigilance=0.8)
        with engine_type() as engine:
            engine.fit(separation_data, params)
            count = engine.get_category_count()

            first = engine.predict(separation_data[-1], params)
            second = engine.predict(separation_data[-1], params)

            assert first == second
            assert engine.get_category_count() == count
