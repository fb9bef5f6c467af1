"""Tests for the hypersphere and hyperellipsoid engines."""

import numpy as np
import pytest

from artcluster import (
    EllipsoidART,
    EllipsoidParameters,
    HypersphereART,
    HypersphereParameters,
)
from artcluster.core import EllipsoidWeight, HypersphereWeight
from artcluster.engine.geometry import EllipsoidGeometry, HypersphereGeometry


class TestHypersphereART:
    """Ball-shaped categories."""

    def test_new_category_uses_default_radius(self):
        """Test that new spheres start at the default radius."""
        engine = HypersphereART()
        result = engine.learn([0.5, 0.5], HypersphereParameters(default_radius=0.1))

        assert isinstance(result.weight, HypersphereWeight)
        assert result.weight.radius == pytest.approx(0.1)
        assert list(result.weight.centroid) == pytest.approx([0.5, 0.5])

    def test_update_grows_radius_and_moves_centroid(self):
        """Test the sphere learning update."""
        engine = HypersphereART()
        params = HypersphereParameters(vigilance=0.8)
        engine.learn([0.5, 0.5], params)
        result = engine.learn([0.6, 0.5], params)

        assert result.category_index == 0
        assert result.match_score == pytest.approx(0.9)
        assert result.weight.radius == pytest.approx(0.05)
        assert list(result.weight.centroid) == pytest.approx([0.55, 0.5])

    def test_distant_pattern_creates_category(self):
        """Test that a distant pattern gets its own sphere."""
        engine = HypersphereART()
        params = HypersphereParameters(vigilance=0.8)
        engine.fit(np.array([[0.5, 0.5], [0.6, 0.5], [0.95, 0.95]]), params)

        assert engine.get_category_count() == 2

    def test_match_score_formula(self):
        """Test the sphere match score."""
        geometry = HypersphereGeometry()
        params = HypersphereParameters(max_radius=2.0)
        weight = HypersphereWeight(np.zeros(2), 0.5)

        # inside the ball the radius dominates
        assert geometry.match_score(np.array([0.1, 0.0]), weight, params) == pytest.approx(0.75)
        assert geometry.match_score(np.array([1.0, 0.0]), weight, params) == pytest.approx(0.5)

    def test_activation_prefers_closer_sphere(self):
        """Test that the nearer sphere is activated more strongly."""
        geometry = HypersphereGeometry()
        params = HypersphereParameters()
        x = np.array([0.2, 0.2])
        near = HypersphereWeight(np.array([0.25, 0.2]), 0.0)
        far = HypersphereWeight(np.array([0.6, 0.6]), 0.0)

        assert geometry.activation(x, near, params) > geometry.activation(x, far, params)

    def test_batch_activations_match_scalar(self, rng):
        """Test that batched sphere activations equal the scalar ones."""
        geometry = HypersphereGeometry()
        params = HypersphereParameters(max_radius=2.0)
        weights = [HypersphereWeight(c, r) for c, r in zip(rng.random((6, 3)), rng.random(6) * 0.3)]
        x = rng.random(3)

        batch = geometry.batch_activations(x, geometry.stack(weights), params)
        scalar = [geometry.activation(x, w, params) for w in weights]
        assert list(batch) == pytest.approx(scalar)


class TestEllipsoidART:
    """Ellipsoid-shaped categories."""

    def test_axis_unset_until_second_sample(self):
        """Test that a new ellipsoid has no major axis."""
        engine = EllipsoidART()
        params = EllipsoidParameters(vigilance=0.75)
        first = engine.learn([0.5, 0.5], params)

        assert isinstance(first.weight, EllipsoidWeight)
        assert not first.weight.has_axis
        assert first.weight.radius == 0.0

    def test_first_update_sets_major_axis(self):
        """Test that the first update sets the major axis."""
        engine = EllipsoidART()
        params = EllipsoidParameters(vigilance=0.75)
        engine.learn([0.5, 0.5], params)
        result = engine.learn([0.6, 0.5], params)

        assert result.category_index == 0
        assert result.match_score == pytest.approx(0.9)
        assert result.weight.has_axis
        assert list(result.weight.major_axis) == pytest.approx([1.0, 0.0])
        assert result.weight.radius == pytest.approx(0.05)
        assert list(result.weight.centroid) == pytest.approx([0.55, 0.5])

    def test_distance_is_shorter_along_major_axis(self):
        """Test that distance along the major axis is shorter."""
        centroid = np.zeros(2)
        axis = np.array([1.0, 0.0])

        along = EllipsoidGeometry.distance(np.array([0.1, 0.0]), centroid, axis, 0.8)
        across = EllipsoidGeometry.distance(np.array([0.0, 0.1]), centroid, axis, 0.8)

        assert along == pytest.approx(0.1)
        assert across == pytest.approx(0.125)

    def test_distance_without_axis_is_euclidean(self):
        """Test plain Euclidean distance before the axis is set."""
        d = EllipsoidGeometry.distance(np.array([0.3, 0.4]), np.zeros(2), np.zeros(2), 0.5)
        assert d == pytest.approx(0.5)

    def test_batch_activations_match_scalar(self, rng):
        """Test that batched ellipsoid activations equal the scalar ones."""
        geometry = EllipsoidGeometry()
        params = EllipsoidParameters(max_radius=3.0)
        axes = rng.normal(size=(5, 3))
        axes /= np.linalg.norm(axes, axis=1, keepdims=True)
        axes[0] = 0.0
        weights = [
            EllipsoidWeight(c, a, r)
            for c, a, r in zip(rng.random((5, 3)), axes, rng.random(5) * 0.2)
        ]
        x = rng.random(3)

        batch = geometry.batch_activations(x, geometry.stack(weights), params)
        scalar = [geometry.activation(x, w, params) for w in weights]
        assert list(batch) == pytest.approx(scalar)

    def test_clusters_elongated_data(self, rng):
        """Test clustering of elongated groups."""
        engine = EllipsoidART()
        params = EllipsoidParameters(vigilance=0.7, mu=0.5)
        line_a = np.column_stack([np.linspace(0.1, 0.3, 10), np.full(10, 0.2)])
        line_b = np.column_stack([np.linspace(0.1, 0.3, 10), np.full(10, 0.8)])

        labels = engine.fit_predict(np.vstack([line_a, line_b]), params)

        assert len(set(labels[:10]) & set(labels[10:])) == 0
