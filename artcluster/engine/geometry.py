"""
Category geometries.

A geometry supplies the four ART rules for one prototype shape: the
activation (choice) function, the match (vigilance) score, the learning
update and the prototype created for an unmatched pattern. Engines are
otherwise identical, so each variant is one geometry plugged into
``BaseART``.

Inputs are first passed through ``prepare`` (complement coding, channel
splitting) and the prepared value is what the rules receive.

Every geometry also has a batched ``batch_activations`` over a stacked
view of all prototypes; vectorized engines use it instead of the
per-category loop.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.distance import cdist

from ..core.errors import InvalidArgumentError
from ..core.parameters import (
    ARTParameters,
    EllipsoidParameters,
    FusionParameters,
    FuzzyParameters,
    HypersphereParameters,
)
from ..core.pattern import Pattern
from ..core.weights import CompositeWeight, EllipsoidWeight, FuzzyWeight, HypersphereWeight


Stacked = Tuple[np.ndarray, ...]


def slice_stacked(stacked: Stacked, indices: range) -> Stacked:
    """Restrict a stacked view to a contiguous range of categories."""
    return tuple(array[indices.start:indices.stop] for array in stacked)


class Geometry:
    """Base class for category geometries."""

    name = "base"
    parameters_type = ARTParameters

    def expected_dimension(self, params: ARTParameters) -> Optional[int]:
        """Input dimension required by the parameters, if they fix one."""
        return None

    def input_layout(self, params: ARTParameters) -> Optional[Dict[str, Any]]:
        """Parameters that shape the prepared input; prototypes only fit one layout."""
        return None

    def validate(self, pattern: Pattern, params: ARTParameters) -> None:
        if not pattern.is_finite():
            raise InvalidArgumentError("Pattern contains non-finite values", argument="pattern")

    def prepare(self, pattern: Pattern, params: ARTParameters) -> Any:
        return pattern.values

    def activation(self, x: Any, weight: Any, params: ARTParameters) -> float:
        raise NotImplementedError

    def match_score(self, x: Any, weight: Any, params: ARTParameters) -> float:
        raise NotImplementedError

    def update(self, x: Any, weight: Any, params: ARTParameters) -> Any:
        raise NotImplementedError

    def initial_weight(self, x: Any, params: ARTParameters) -> Any:
        raise NotImplementedError

    def stack(self, weights: Sequence[Any]) -> Stacked:
        raise NotImplementedError

    def batch_activations(self, x: Any, stacked: Stacked, params: ARTParameters) -> np.ndarray:
        raise NotImplementedError

    def center(self, weight: Any) -> np.ndarray:
        return weight.center()


# ---------------------------------------------------------------------------
# Fuzzy hyperboxes
# ---------------------------------------------------------------------------

def _fuzzy_activation(x: np.ndarray, w: np.ndarray, alpha: float) -> float:
    return float(np.minimum(x, w).sum() / (alpha + w.sum()))


def _fuzzy_match(x: np.ndarray, w: np.ndarray, epsilon: float) -> float:
    norm = x.sum()
    if abs(norm) <= epsilon:
        return 1.0
    return float(np.minimum(x, w).sum() / norm)


def _fuzzy_update(x: np.ndarray, w: np.ndarray, beta: float) -> np.ndarray:
    return beta * np.minimum(x, w) + (1.0 - beta) * w


class FuzzyGeometry(Geometry):
    """
    FuzzyART hyperboxes.

    T = |x ∧ w| / (alpha + |w|),  M = |x ∧ w| / |x|,
    w' = beta (x ∧ w) + (1 - beta) w
    """

    name = "fuzzy"
    parameters_type = FuzzyParameters

    def input_layout(self, params: FuzzyParameters) -> Dict[str, Any]:
        return {"complement_coding": params.complement_coding}

    def prepare(self, pattern: Pattern, params: FuzzyParameters) -> np.ndarray:
        values = pattern.values
        if params.complement_coding:
            return np.concatenate([values, 1.0 - values])
        return values

    def activation(self, x, weight: FuzzyWeight, params) -> float:
        return _fuzzy_activation(x, weight.vector, params.alpha)

    def match_score(self, x, weight: FuzzyWeight, params) -> float:
        return _fuzzy_match(x, weight.vector, params.epsilon)

    def update(self, x, weight: FuzzyWeight, params) -> FuzzyWeight:
        return FuzzyWeight(
            _fuzzy_update(x, weight.vector, params.learning_rate),
            complement_coded=weight.complement_coded,
        )

    def initial_weight(self, x, params) -> FuzzyWeight:
        return FuzzyWeight(x, complement_coded=params.complement_coding)

    def stack(self, weights) -> Stacked:
        return (np.stack([w.vector for w in weights]),)

    def batch_activations(self, x, stacked, params) -> np.ndarray:
        (matrix,) = stacked
        return np.minimum(matrix, x).sum(axis=1) / (params.alpha + matrix.sum(axis=1))


# ---------------------------------------------------------------------------
# Hyperspheres
# ---------------------------------------------------------------------------

class HypersphereGeometry(Geometry):
    """
    HypersphereART.

    With d = ||x - c|| and r-hat the maximum radius:
    T = (r_hat - max(R, d)) / (r_hat - R + alpha),  M = 1 - max(R, d) / r_hat.
    Learning grows the radius and pulls the centroid just enough to cover x.
    """

    name = "hypersphere"
    parameters_type = HypersphereParameters

    def activation(self, x, weight: HypersphereWeight, params) -> float:
        d = float(np.linalg.norm(x - weight.centroid))
        return float(self._activation(d, weight.radius, params))

    @staticmethod
    def _activation(d, radius, params):
        return (params.max_radius - np.maximum(radius, d)) / (
            params.max_radius - radius + params.alpha
        )

    def match_score(self, x, weight: HypersphereWeight, params) -> float:
        d = float(np.linalg.norm(x - weight.centroid))
        return 1.0 - max(weight.radius, d) / params.max_radius

    def update(self, x, weight: HypersphereWeight, params) -> HypersphereWeight:
        diff = x - weight.centroid
        d = float(np.linalg.norm(diff))
        radius = weight.radius
        half_beta = params.learning_rate / 2.0
        if d <= params.epsilon:
            return HypersphereWeight(weight.centroid, radius)
        new_radius = radius + half_beta * (max(radius, d) - radius)
        new_centroid = weight.centroid + half_beta * diff * (1.0 - min(radius, d) / d)
        return HypersphereWeight(new_centroid, new_radius)

    def initial_weight(self, x, params) -> HypersphereWeight:
        return HypersphereWeight(x, params.default_radius)

    def stack(self, weights) -> Stacked:
        return (
            np.stack([w.centroid for w in weights]),
            np.array([w.radius for w in weights], dtype=np.float64),
        )

    def batch_activations(self, x, stacked, params) -> np.ndarray:
        centroids, radii = stacked
        distances = cdist(x[np.newaxis, :], centroids)[0]
        return self._activation(distances, radii, params)


# ---------------------------------------------------------------------------
# Hyperellipsoids
# ---------------------------------------------------------------------------

class EllipsoidGeometry(Geometry):
    """
    EllipsoidART.

    Distance to an ellipsoid with centroid c, unit major axis m and axis
    ratio mu:  d = (1/mu) sqrt(||x - c||^2 - (1 - mu^2) (m . (x - c))^2),
    plain Euclidean distance while m is unset.
    T = (r_hat - R - max(R, d)) / (r_hat - 2R + alpha),
    M = 1 - (R + max(R, d)) / r_hat.
    """

    name = "ellipsoid"
    parameters_type = EllipsoidParameters

    @staticmethod
    def distance(x: np.ndarray, centroid: np.ndarray, axis: np.ndarray, mu: float) -> float:
        diff = x - centroid
        squared = float(diff @ diff)
        if not np.any(axis):
            return float(np.sqrt(squared))
        projection = float(axis @ diff)
        return float(np.sqrt(max(squared - (1.0 - mu ** 2) * projection ** 2, 0.0)) / mu)

    @staticmethod
    def _activation(d, radius, params):
        return (params.max_radius - radius - np.maximum(radius, d)) / (
            params.max_radius - 2.0 * radius + params.alpha
        )

    def activation(self, x, weight: EllipsoidWeight, params) -> float:
        d = self.distance(x, weight.centroid, weight.major_axis, params.mu)
        return float(self._activation(d, weight.radius, params))

    def match_score(self, x, weight: EllipsoidWeight, params) -> float:
        d = self.distance(x, weight.centroid, weight.major_axis, params.mu)
        return 1.0 - (weight.radius + max(weight.radius, d)) / params.max_radius

    def update(self, x, weight: EllipsoidWeight, params) -> EllipsoidWeight:
        diff = x - weight.centroid
        offset = float(np.linalg.norm(diff))
        axis = weight.major_axis
        if not weight.has_axis and offset > params.epsilon:
            axis = diff / offset
        d = self.distance(x, weight.centroid, axis, params.mu)
        radius = weight.radius
        if d <= params.epsilon:
            return EllipsoidWeight(weight.centroid, axis, radius)
        half_beta = params.learning_rate / 2.0
        new_radius = radius + half_beta * (max(radius, d) - radius)
        new_centroid = weight.centroid + half_beta * diff * (1.0 - min(radius, d) / d)
        return EllipsoidWeight(new_centroid, axis, new_radius)

    def initial_weight(self, x, params) -> EllipsoidWeight:
        return EllipsoidWeight(x, np.zeros_like(x), 0.0)

    def stack(self, weights) -> Stacked:
        return (
            np.stack([w.centroid for w in weights]),
            np.stack([w.major_axis for w in weights]),
            np.array([w.radius for w in weights], dtype=np.float64),
        )

    def batch_activations(self, x, stacked, params) -> np.ndarray:
        centroids, axes, radii = stacked
        diff = x[np.newaxis, :] - centroids
        squared = np.einsum('ij,ij->i', diff, diff)
        projection = np.einsum('ij,ij->i', axes, diff)
        has_axis = np.any(axes != 0.0, axis=1)
        shaped = np.sqrt(np.maximum(squared - (1.0 - params.mu ** 2) * projection ** 2, 0.0)) / params.mu
        distances = np.where(has_axis, shaped, np.sqrt(squared))
        return self._activation(distances, radii, params)


# ---------------------------------------------------------------------------
# Multi-channel fusion
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FusionInput:
    """A pattern split into prepared channel vectors."""

    channels: Tuple[np.ndarray, ...]
    active: Tuple[bool, ...]

    def active_indices(self) -> List[int]:
        return [k for k, flag in enumerate(self.active) if flag]


class FusionGeometry(Geometry):
    """
    FusionART over fuzzy channels.

    Channel activations and match scores are combined as
    sum(gamma_k * s_k) / sum(gamma_k) over the active channels, so heavily
    weighted channels dominate category choice and resonance. With channel
    skipping enabled, a channel whose slice contains NaN or is entirely zero
    is left out of the combination and its prototype is not updated.
    """

    name = "fusion"
    parameters_type = FusionParameters

    def expected_dimension(self, params: FusionParameters) -> Optional[int]:
        return params.total_dimension

    def input_layout(self, params: FusionParameters) -> Dict[str, Any]:
        return {
            "channel_dims": params.channel_dims,
            "complement_coding": params.complement_coding,
        }

    def _channel_active(self, values: np.ndarray, params: FusionParameters) -> bool:
        if not params.enable_channel_skipping:
            return True
        if np.any(np.isnan(values)):
            return False
        return bool(np.any(np.abs(values) > params.sparsity_tolerance))

    def validate(self, pattern: Pattern, params: FusionParameters) -> None:
        values = pattern.values
        active = 0
        for sl in params.channel_slices():
            channel = values[sl]
            if not self._channel_active(channel, params):
                continue
            if not np.all(np.isfinite(channel)):
                raise InvalidArgumentError(
                    "Pattern contains non-finite values", argument="pattern"
                )
            active += 1
        if active == 0:
            raise InvalidArgumentError(
                "Every channel of the pattern was skipped", argument="pattern"
            )

    def prepare(self, pattern: Pattern, params: FusionParameters) -> FusionInput:
        values = pattern.values
        channels = []
        active = []
        for sl in params.channel_slices():
            channel = values[sl]
            is_active = self._channel_active(channel, params)
            if is_active and params.complement_coding:
                channel = np.concatenate([channel, 1.0 - channel])
            elif not is_active:
                width = channel.shape[0] * (2 if params.complement_coding else 1)
                channel = np.ones(width)
            channels.append(channel)
            active.append(is_active)
        return FusionInput(tuple(channels), tuple(active))

    def _combine(self, scores: Sequence[float], x: FusionInput, params: FusionParameters) -> float:
        total = 0.0
        norm = 0.0
        for k in x.active_indices():
            gamma = params.channel_weights[k]
            total += gamma * scores[k]
            norm += gamma
        if norm <= 0.0:
            return 0.0
        return total / norm

    def channel_activations(self, x: FusionInput, weight: CompositeWeight, params) -> List[float]:
        return [
            _fuzzy_activation(channel, w.vector, params.alpha)
            for channel, w in zip(x.channels, weight.channels)
        ]

    def channel_match_scores(self, x: FusionInput, weight: CompositeWeight, params) -> List[float]:
        return [
            _fuzzy_match(channel, w.vector, params.epsilon)
            for channel, w in zip(x.channels, weight.channels)
        ]

    def activation(self, x: FusionInput, weight: CompositeWeight, params) -> float:
        return self._combine(self.channel_activations(x, weight, params), x, params)

    def match_score(self, x: FusionInput, weight: CompositeWeight, params) -> float:
        return self._combine(self.channel_match_scores(x, weight, params), x, params)

    def update(self, x: FusionInput, weight: CompositeWeight, params) -> CompositeWeight:
        channels = []
        for k, (channel, w) in enumerate(zip(x.channels, weight.channels)):
            if x.active[k]:
                w = FuzzyWeight(
                    _fuzzy_update(channel, w.vector, params.learning_rate),
                    complement_coded=w.complement_coded,
                )
            channels.append(w)
        return CompositeWeight(tuple(channels))

    def initial_weight(self, x: FusionInput, params) -> CompositeWeight:
        return CompositeWeight(tuple(
            FuzzyWeight(channel, complement_coded=params.complement_coding)
            for channel in x.channels
        ))

    def stack(self, weights) -> Stacked:
        channel_count = len(weights[0].channels)
        return tuple(
            np.stack([w.channels[k].vector for w in weights]) for k in range(channel_count)
        )

    def batch_activations(self, x: FusionInput, stacked, params) -> np.ndarray:
        total = np.zeros(stacked[0].shape[0])
        norm = 0.0
        for k in x.active_indices():
            matrix = stacked[k]
            gamma = params.channel_weights[k]
            channel = x.channels[k]
            total += gamma * (
                np.minimum(matrix, channel).sum(axis=1) / (params.alpha + matrix.sum(axis=1))
            )
            norm += gamma
        if norm <= 0.0:
            return total
        return total / norm


GEOMETRIES = {
    geometry.name: geometry
    for geometry in (FuzzyGeometry, HypersphereGeometry, EllipsoidGeometry, FusionGeometry)
}
