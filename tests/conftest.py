"""Shared fixtures for the clustering tests."""

import numpy as np
import pytest


BLOB_CENTERS = [0.125, 0.375, 0.625, 0.875]


def _make_blobs(rng, count, per_blob=8, spread=0.02):
    """Points scattered tightly around ``count`` centers of a 4x4 grid in 2-D."""
    centers = [(x, y) for x in BLOB_CENTERS for y in BLOB_CENTERS][:count]
    points = []
    for cx, cy in centers:
        offsets = rng.uniform(-spread, spread, size=(per_blob, 2))
        points.append(np.array([cx, cy]) + offsets)
    return np.vstack(points)


@pytest.fixture
def rng():
    """Reproducible random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate configuration lookup from the developer's environment."""
    for name in (
        "ARTCLUSTER_CONFIG",
        "ARTCLUSTER_ALGORITHM",
        "ARTCLUSTER_VIGILANCE",
        "ARTCLUSTER_LEARNING_RATE",
        "ARTCLUSTER_PARALLELISM",
        "ARTCLUSTER_ENABLE_SIMD",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_blobs(rng):
    """Factory for well separated 2-D blobs: ``make_blobs(count, per_blob=8)``."""
    def factory(count, per_blob=8, spread=0.02):
        return _make_blobs(rng, count, per_blob=per_blob, spread=spread)
    return factory
