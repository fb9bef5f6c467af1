"""
Hierarchical clustering with a fixed stack of ART layers.

Layers are ordered bottom (index 0) to top. Each layer runs its own
resonance search and update on its input; links between consecutive
layers record which upper category each lower category fed into, so a
label at any level can be mapped to the top.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.errors import EngineClosedError, InvalidArgumentError, MissingConfigurationError
from ..core.parameters import DeepARTMAPParameters
from ..core.pattern import Pattern
from ..core.results import ActivationResult, DeepResult, NoMatch
from ..performance.stats import PerformanceStats
from ..utils.logging_setup import get_logger
from .base import BaseART

logger = get_logger(__name__)


class DeepARTMAP:
    """
    Stack of independent ART engines linked bottom to top.

    The same pattern can be fed to every layer, or one pattern per layer
    can be given (for example progressively coarser views of one sample).
    ``get_category_count`` reports the top layer.
    """

    def __init__(self, layers: Sequence[BaseART]):
        layers = list(layers)
        if len(layers) < 2:
            raise InvalidArgumentError("DeepARTMAP requires at least 2 layers", argument="layers")
        if len({id(layer) for layer in layers}) != len(layers):
            raise InvalidArgumentError("Each layer must be a distinct engine", argument="layers")
        for layer in layers:
            if not isinstance(layer, BaseART):
                raise InvalidArgumentError(
                    f"Layers must be ART engines, got {type(layer).__name__}", argument="layers"
                )
        self._layers: Tuple[BaseART, ...] = tuple(layers)
        self._maps: List[Dict[int, int]] = [{} for _ in range(len(layers) - 1)]
        self.map_conflicts = 0
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"DeepARTMAP(layers={self.get_layer_category_counts()})"

    @property
    def layers(self) -> Tuple[BaseART, ...]:
        return self._layers

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    def learn(self, pattern: Any, params: DeepARTMAPParameters) -> DeepResult:
        """
        Learn one sample in every layer, bottom to top.

        Args:
            pattern: One pattern for all layers, or a sequence of one
                pattern per layer
            params: Per-layer parameters

        Returns:
            DeepResult whose ``category_index`` is the top-layer category
        """
        inputs = self._validate(pattern, params)

        results = [
            layer.learn(layer_input, layer_params)
            for layer, layer_input, layer_params in zip(self._layers, inputs, params.layer_parameters)
        ]
        categories = tuple(result.category_index for result in results)

        for level, link in enumerate(self._maps):
            lower, upper = categories[level], categories[level + 1]
            existing = link.get(lower)
            if existing is None:
                link[lower] = upper
            elif existing != upper:
                self.map_conflicts += 1
                logger.debug(
                    f"Layer {level} category {lower} linked to {existing}, observed {upper}"
                )
                if not params.enforce_consistency:
                    link[lower] = upper

        top = results[-1]
        return DeepResult(
            category_index=top.category_index,
            activation=top.activation,
            weight=top.weight,
            match_score=top.match_score,
            created=top.created,
            layer_categories=categories,
        )

    def predict(self, pattern: Any, params: DeepARTMAPParameters) -> ActivationResult:
        """
        Predict the joint category assignment without learning.

        When the top layer rejects the pattern the answer is taken from the
        highest layer that accepted it, mapped upwards through the links.
        Layers that rejected the pattern report -1.
        """
        inputs = self._validate(pattern, params)
        results = [
            layer.predict(layer_input, layer_params)
            for layer, layer_input, layer_params in zip(self._layers, inputs, params.layer_parameters)
        ]
        categories = tuple(r.category_index if r.is_success else -1 for r in results)

        for level in range(self.layer_count - 1, -1, -1):
            result = results[level]
            if not result.is_success:
                continue
            top_index = self.map_deep(level, result.category_index)
            if top_index is None:
                continue
            top = results[-1] if results[-1].is_success else None
            return DeepResult(
                category_index=top_index,
                activation=top.activation if top else result.activation,
                weight=self._layers[-1].store.weight(top_index),
                match_score=top.match_score if top else result.match_score,
                layer_categories=categories,
            )
        return NoMatch.instance()

    def map_deep(self, level: int, label: int) -> Optional[int]:
        """
        Follow links from ``label`` at ``level`` up to the top layer.

        Negative levels count from the top. Returns None when a link on the
        way up has not been learned yet.
        """
        actual = level if level >= 0 else self.layer_count + level
        if actual < 0 or actual >= self.layer_count:
            raise InvalidArgumentError(
                f"Level out of bounds: {level} (layers: {self.layer_count})", argument="level"
            )
        current: Optional[int] = label
        for link in self._maps[actual:]:
            current = link.get(current)
            if current is None:
                return None
        return current

    def get_links(self, level: int) -> Dict[int, int]:
        """Copy of the lower-to-upper category links above ``level``."""
        return dict(self._maps[level])

    def get_category_count(self) -> int:
        return self._layers[-1].get_category_count()

    def get_layer_category_counts(self) -> List[int]:
        return [layer.get_category_count() for layer in self._layers]

    def get_performance_stats(self) -> PerformanceStats:
        return PerformanceStats.merge_all(layer.get_performance_stats() for layer in self._layers)

    def reset_performance_tracking(self) -> None:
        for layer in self._layers:
            layer.reset_performance_tracking()

    def is_vectorized(self) -> bool:
        return all(layer.is_vectorized() for layer in self._layers)

    def get_vector_species_length(self) -> int:
        return min(layer.get_vector_species_length() for layer in self._layers)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close every layer. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        for layer in self._layers:
            layer.close()

    def fit(self, data: Any, params: DeepARTMAPParameters, epochs: int = 1) -> "DeepARTMAP":
        """Learn every sample of ``data`` for ``epochs`` passes."""
        if epochs < 1:
            raise InvalidArgumentError(f"epochs must be at least 1, got {epochs}", argument="epochs")
        samples = list(data)
        for _ in range(epochs):
            for sample in samples:
                self.learn(sample, params)
        return self

    def predict_batch(self, data: Any, params: DeepARTMAPParameters) -> np.ndarray:
        """Top-layer label for every sample; -1 where nothing matched."""
        samples = list(data)
        labels = np.full(len(samples), -1, dtype=np.int64)
        for i, sample in enumerate(samples):
            result = self.predict(sample, params)
            if result.is_success:
                labels[i] = result.category_index
        return labels

    def _validate(self, pattern: Any, params: Any) -> List[Any]:
        if self._closed:
            raise EngineClosedError("DeepARTMAP")
        if pattern is None:
            raise InvalidArgumentError("Input pattern cannot be None", argument="pattern")
        if params is None:
            raise MissingConfigurationError()
        if not isinstance(params, DeepARTMAPParameters):
            raise InvalidArgumentError(
                f"DeepARTMAP requires DeepARTMAPParameters, got {type(params).__name__}",
                argument="params",
            )
        if params.layer_count != self.layer_count:
            raise InvalidArgumentError(
                f"Expected parameters for {self.layer_count} layers, got {params.layer_count}",
                argument="params",
            )

        if self._is_per_layer(pattern):
            inputs = list(pattern)
            if len(inputs) != self.layer_count:
                raise InvalidArgumentError(
                    f"Expected {self.layer_count} layer inputs, got {len(inputs)}",
                    argument="pattern",
                )
        else:
            inputs = [pattern] * self.layer_count

        # Validate every layer before any of them learns
        validated = []
        for layer, layer_input, layer_params in zip(self._layers, inputs, params.layer_parameters):
            checked, _ = layer._validate(layer_input, layer_params)
            validated.append(checked)
        return validated

    @staticmethod
    def _is_per_layer(pattern: Any) -> bool:
        if isinstance(pattern, Pattern):
            return False
        if isinstance(pattern, np.ndarray):
            return pattern.ndim == 2
        if isinstance(pattern, (list, tuple)) and pattern:
            return all(
                isinstance(item, (Pattern, np.ndarray, list, tuple)) for item in pattern
            )
        return False
