"""
Template engine shared by every ART variant.

``BaseART`` owns the category store, the statistics tracker and the worker
pool, and runs the common learning cycle:

1. validate the call (pattern, parameters, dimension) before touching state
2. scan activations over every category
3. test candidates against vigilance in activation order
4. update the resonating category, or append a new one built from the input

Subclasses only choose a geometry and whether the vectorized scan is used.
"""

import threading
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.errors import (
    DimensionMismatchError,
    EngineClosedError,
    InvalidArgumentError,
    MissingConfigurationError,
)
from ..core.parameters import ARTParameters
from ..core.pattern import Pattern, as_pattern
from ..core.results import ActivationResult, MatchOutcome, NoMatch, Success
from ..core.store import Category, CategoryStore
from ..performance.cache import LRUCache
from ..performance.parallel import ParallelExecutor
from ..performance.stats import PerformanceStats, PerformanceTracker
from ..utils.logging_setup import get_logger
from .geometry import Geometry
from .search import resonance_search, scan_activations

logger = get_logger(__name__)


class BaseART:
    """
    Incremental clustering engine.

    Engines are not meant to be shared between threads without external
    synchronisation; the internal lock only keeps a single ``learn`` atomic.
    Release the worker pool with ``close()`` or a ``with`` block.
    """

    geometry: Geometry = Geometry()
    vectorized: bool = False

    # Width of the register the vectorized path is tuned for
    SIMD_REGISTER_BITS = 256

    def __init__(self):
        self.store = CategoryStore()
        self.tracker = PerformanceTracker()
        self._cache = LRUCache(max_size=0)
        self._executor: Optional[ParallelExecutor] = None
        self._lock = threading.RLock()
        self._closed = False
        self._total_activations = 0
        self._input_layout: Optional[Dict[str, Any]] = None

    @property
    def name(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"{self.name}(categories={self.get_category_count()})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def learn(self, pattern: Any, params: ARTParameters) -> ActivationResult:
        """
        Present one pattern and learn from it.

        Args:
            pattern: Pattern or 1-D numeric sequence
            params: Parameters of this engine's variant

        Returns:
            Success naming the category that resonated or was created

        Raises:
            InvalidArgumentError: pattern absent, malformed or of the wrong dimension
            MissingConfigurationError: params absent
        """
        started = time.perf_counter()
        pattern, x = self._validate(pattern, params)

        with self._lock:
            weights = self.store.weights()
            simd = self._use_simd(pattern, params)
            activations = self._scan(x, weights, params, simd)
            outcome = resonance_search(self.geometry, x, weights, activations, params)

            salience_started = time.perf_counter()
            if outcome.matched:
                index = outcome.index
                weight = self.geometry.update(x, weights[index], params)
                self.store.replace(index, weight)
                result = Success(
                    category_index=index,
                    activation=outcome.activation,
                    weight=weight,
                    match_score=outcome.match_score,
                )
            else:
                weight = self.geometry.initial_weight(x, params)
                if not len(self.store):
                    self._input_layout = self.geometry.input_layout(params)
                self.store.fix_dimension(pattern.dimension)
                index = self.store.append(weight)
                logger.debug(
                    f"{self.name} created category {index} after {outcome.attempts} rejected candidates"
                )
                result = Success(
                    category_index=index,
                    activation=1.0,
                    weight=weight,
                    match_score=1.0,
                    created=True,
                )
            self.tracker.record_salience(
                index, result.match_score, time.perf_counter() - salience_started
            )
            self._total_activations += 1
            self._cache.clear()
            utilization = self._utilization()

        self._record(pattern, params, started, simd, utilization)
        return result

    def predict(self, pattern: Any, params: ARTParameters) -> ActivationResult:
        """
        Classify a pattern without learning.

        Returns the vigilance-gated winner, or NoMatch when the store is
        empty or every category rejects the pattern. Repeated calls with no
        intervening ``learn`` return equal results.
        """
        started = time.perf_counter()
        pattern, x = self._validate(pattern, params)
        simd = self._use_simd(pattern, params)

        with self._lock:
            self._cache.resize(params.cache_size)
            key = (pattern.key(), self.store.revision, params)
            result = self._cache.get(key) if self._cache.enabled else None
            if result is None:
                result = self._predict(pattern, x, params, simd)
                self._cache.set(key, result)

        self._record(pattern, params, started, simd)
        return result

    def search(self, pattern: Any, params: ARTParameters) -> MatchOutcome:
        """Run resonance search only; never mutates or records statistics."""
        pattern, x = self._validate(pattern, params)
        with self._lock:
            weights = self.store.weights()
            activations = self._scan(x, weights, params, self._use_simd(pattern, params))
            return resonance_search(self.geometry, x, weights, activations, params)

    def get_category_count(self) -> int:
        return len(self.store)

    @property
    def categories(self) -> Tuple[Any, ...]:
        """Current prototypes in index order."""
        return tuple(self.store.weights())

    def get_category(self, index: int) -> Category:
        return Category(index=index, weight=self.store.weight(index),
                        update_count=self.store.update_count(index))

    def get_category_usage(self, index: int) -> int:
        """Number of times the category has been updated since creation."""
        return self.store.update_count(index)

    @property
    def expected_dimension(self) -> Optional[int]:
        return self.store.expected_dimension

    @property
    def total_activations(self) -> int:
        """Number of patterns learned since the engine was created."""
        return self._total_activations

    def get_performance_stats(self) -> PerformanceStats:
        return self.tracker.snapshot()

    def reset_performance_tracking(self) -> None:
        """Zero the statistics; learned categories are kept."""
        self.tracker.reset()

    def is_vectorized(self) -> bool:
        return self.vectorized

    def get_vector_species_length(self) -> int:
        """Number of float64 lanes processed together; 1 for scalar engines."""
        if not self.vectorized:
            return 1
        return self.SIMD_REGISTER_BITS // 64

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the worker pool. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._executor is not None:
            self._executor.shutdown()
            self._executor = None
        self._cache.clear()
        logger.info(
            f"Closed {self.name} with {self.get_category_count()} categories "
            f"after {self._total_activations} learning steps"
        )

    # ------------------------------------------------------------------
    # Batch API
    # ------------------------------------------------------------------

    def partial_fit(self, data: Any, params: ARTParameters) -> "BaseART":
        """Learn every row of ``data`` once, in order."""
        for row in self._rows(data):
            self.learn(row, params)
        return self

    def fit(self, data: Any, params: ARTParameters, epochs: int = 1) -> "BaseART":
        """Learn every row of ``data`` for ``epochs`` passes."""
        if epochs < 1:
            raise InvalidArgumentError(f"epochs must be at least 1, got {epochs}", argument="epochs")
        rows = self._rows(data)
        for _ in range(epochs):
            for row in rows:
                self.learn(row, params)
        return self

    def fit_predict(self, data: Any, params: ARTParameters, epochs: int = 1) -> np.ndarray:
        """Fit and return the category each row was assigned in the final pass."""
        if epochs < 1:
            raise InvalidArgumentError(f"epochs must be at least 1, got {epochs}", argument="epochs")
        rows = self._rows(data)
        labels = np.empty(len(rows), dtype=np.int64)
        for _ in range(epochs):
            for i, row in enumerate(rows):
                labels[i] = self.learn(row, params).category_index
        return labels

    def predict_batch(self, data: Any, params: ARTParameters) -> np.ndarray:
        """Predict every row; rows that match nothing get label -1."""
        rows = self._rows(data)
        labels = np.full(len(rows), -1, dtype=np.int64)
        for i, row in enumerate(rows):
            result = self.predict(row, params)
            if result.is_success:
                labels[i] = result.category_index
        return labels

    def cluster_centers(self) -> np.ndarray:
        """Representative point of every category, one row each."""
        weights = self.store.weights()
        if not weights:
            return np.empty((0, self.expected_dimension or 0))
        return np.stack([self.geometry.center(w) for w in weights])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(self, pattern: Any, params: Any) -> Tuple[Pattern, Any]:
        if self._closed:
            raise EngineClosedError(self.name)
        if pattern is None:
            raise InvalidArgumentError("Input pattern cannot be None", argument="pattern")
        if params is None:
            raise MissingConfigurationError()
        if not isinstance(params, self.geometry.parameters_type):
            raise InvalidArgumentError(
                f"{self.name} requires {self.geometry.parameters_type.__name__}, "
                f"got {type(params).__name__}",
                argument="params",
            )
        layout = self.geometry.input_layout(params)
        if len(self.store) and layout != self._input_layout:
            raise InvalidArgumentError(
                f"{self.name} categories were learned with {self._input_layout}, "
                f"params give {layout}",
                argument="params",
            )
        pattern = as_pattern(pattern)
        self.store.check_dimension(pattern.dimension)
        required = self.geometry.expected_dimension(params)
        if required is not None and pattern.dimension != required:
            raise DimensionMismatchError(required, pattern.dimension)
        self.geometry.validate(pattern, params)
        return pattern, self.geometry.prepare(pattern, params)

    def _use_simd(self, pattern: Pattern, params: ARTParameters) -> bool:
        return (
            self.vectorized
            and params.enable_simd
            and pattern.dimension >= self.get_vector_species_length()
        )

    def _scan(self, x: Any, weights: Sequence[Any], params: ARTParameters, simd: bool) -> np.ndarray:
        stacked = None
        if simd and weights:
            stacked = lambda: self.store.derived(self.geometry.name, self.geometry.stack)
        return scan_activations(
            self.geometry, x, weights, params,
            stacked=stacked,
            executor=self._get_executor(params, len(weights)),
        )

    def _get_executor(self, params: ARTParameters, count: int) -> Optional[ParallelExecutor]:
        if params.parallelism_level <= 1 or count < params.parallel_threshold:
            return None
        if self._executor is not None and self._executor.max_workers != params.parallelism_level:
            self._executor.shutdown()
            self._executor = None
        if self._executor is None:
            self._executor = ParallelExecutor(
                max_workers=params.parallelism_level,
                thread_name_prefix=self.name,
            )
        return self._executor

    def _predict(self, pattern: Pattern, x: Any, params: ARTParameters, simd: bool) -> ActivationResult:
        weights = self.store.weights()
        if not weights:
            return NoMatch("no categories learned")
        activations = self._scan(x, weights, params, simd)
        outcome = resonance_search(self.geometry, x, weights, activations, params)
        if not outcome.matched:
            return NoMatch.instance()
        return Success(
            category_index=outcome.index,
            activation=outcome.activation,
            weight=weights[outcome.index],
            match_score=outcome.match_score,
        )

    def _utilization(self) -> float:
        counts = self.store.update_counts()
        if not counts:
            return 0.0
        return sum(1 for c in counts if c > 0) / len(counts)

    def _record(self, pattern: Pattern, params: ARTParameters, started: float,
                simd: bool, utilization: Optional[float] = None) -> None:
        sparsity = pattern.sparsity(params.sparsity_tolerance)
        self.tracker.record_operation(
            duration=time.perf_counter() - started,
            simd=simd,
            sparse=sparsity >= params.sparsity_threshold,
            memory_efficiency=sparsity,
            utilization=utilization,
        )

    @staticmethod
    def _rows(data: Any) -> List[Any]:
        if isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise InvalidArgumentError(
                    f"Batch data must be two-dimensional, got shape {data.shape}",
                    argument="data",
                )
            return list(data)
        return list(data)
