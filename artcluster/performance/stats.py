"""
Performance statistics for ART engines.

``PerformanceStats`` is an immutable snapshot; ``PerformanceTracker`` is
the mutable, lock-guarded recorder an engine feeds after every operation.
Snapshots taken from independent engines can be combined with ``merge``.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional


def _weighted_mean(a: float, weight_a: float, b: float, weight_b: float) -> float:
    total = weight_a + weight_b
    if total <= 0:
        return (a + b) / 2.0
    return (a * weight_a + b * weight_b) / total


@dataclass(frozen=True)
class PerformanceStats:
    """Aggregate counters and running averages for one or more engines."""

    total_operations: int = 0
    simd_operations: int = 0
    average_processing_time: float = 0.0
    average_salience_computation_time: float = 0.0
    statistics_update_count: int = 0
    average_category_utilization: float = 0.0
    category_salience: Mapping[int, float] = field(default_factory=dict)
    sparse_vector_operations: int = 0
    memory_efficiency_ratio: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "category_salience", dict(self.category_salience))

    @classmethod
    def empty(cls) -> "PerformanceStats":
        return cls()

    @property
    def simd_utilization_ratio(self) -> float:
        if self.total_operations == 0:
            return 0.0
        return self.simd_operations / self.total_operations

    @property
    def salience_overhead_ratio(self) -> float:
        if self.average_processing_time == 0:
            return 0.0
        return self.average_salience_computation_time / self.average_processing_time

    @property
    def sparse_operation_ratio(self) -> float:
        if self.total_operations == 0:
            return 0.0
        return self.sparse_vector_operations / self.total_operations

    def merge(self, other: "PerformanceStats") -> "PerformanceStats":
        """
        Combine two snapshots.

        Counters are summed. Averages are weighted by ``total_operations``,
        except the salience computation time which is weighted by
        ``statistics_update_count``. Salience scores present in both
        snapshots are averaged.
        """
        ops_a, ops_b = self.total_operations, other.total_operations
        upd_a, upd_b = self.statistics_update_count, other.statistics_update_count

        salience = dict(self.category_salience)
        for index, score in other.category_salience.items():
            if index in salience:
                salience[index] = (salience[index] + score) / 2.0
            else:
                salience[index] = score

        return PerformanceStats(
            total_operations=ops_a + ops_b,
            simd_operations=self.simd_operations + other.simd_operations,
            average_processing_time=_weighted_mean(
                self.average_processing_time, ops_a, other.average_processing_time, ops_b
            ),
            average_salience_computation_time=_weighted_mean(
                self.average_salience_computation_time, upd_a,
                other.average_salience_computation_time, upd_b,
            ),
            statistics_update_count=upd_a + upd_b,
            average_category_utilization=_weighted_mean(
                self.average_category_utilization, ops_a,
                other.average_category_utilization, ops_b,
            ),
            category_salience=salience,
            sparse_vector_operations=self.sparse_vector_operations + other.sparse_vector_operations,
            memory_efficiency_ratio=_weighted_mean(
                self.memory_efficiency_ratio, ops_a, other.memory_efficiency_ratio, ops_b
            ),
        )

    @classmethod
    def merge_all(cls, snapshots: Iterable["PerformanceStats"]) -> "PerformanceStats":
        result = cls.empty()
        for snapshot in snapshots:
            result = result.merge(snapshot)
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'total_operations': self.total_operations,
            'simd_operations': self.simd_operations,
            'average_processing_time_ms': round(self.average_processing_time * 1000, 4),
            'average_salience_computation_time_ms': round(
                self.average_salience_computation_time * 1000, 4
            ),
            'statistics_update_count': self.statistics_update_count,
            'average_category_utilization': round(self.average_category_utilization, 4),
            'category_salience': {k: round(v, 4) for k, v in sorted(self.category_salience.items())},
            'sparse_vector_operations': self.sparse_vector_operations,
            'memory_efficiency_ratio': round(self.memory_efficiency_ratio, 4),
            'simd_utilization_ratio': round(self.simd_utilization_ratio, 4),
            'salience_overhead_ratio': round(self.salience_overhead_ratio, 4),
            'sparse_operation_ratio': round(self.sparse_operation_ratio, 4),
        }


class PerformanceTracker:
    """
    Thread-safe recorder behind ``get_performance_stats()``.

    Salience of a category is the running mean match score of the patterns
    that resonated with it.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.reset()

    def reset(self):
        """Drop all recorded statistics."""
        with self.lock:
            self._operations = 0
            self._simd_operations = 0
            self._sparse_operations = 0
            self._processing_time = 0.0
            self._utilization_sum = 0.0
            self._efficiency_sum = 0.0
            self._salience_updates = 0
            self._salience_time = 0.0
            self._salience_sums: Dict[int, float] = {}
            self._salience_counts: Dict[int, int] = {}

    def record_operation(
        self,
        duration: float,
        simd: bool = False,
        sparse: bool = False,
        memory_efficiency: float = 0.0,
        utilization: Optional[float] = None,
    ):
        """
        Record one learn or predict call.

        Args:
            duration: Wall-clock processing time in seconds
            simd: Whether the vectorized path was taken
            sparse: Whether the input counted as sparse
            memory_efficiency: Share of storage a sparse layout would save
            utilization: Share of categories used so far; carried forward when omitted
        """
        with self.lock:
            if utilization is None:
                utilization = (
                    self._utilization_sum / self._operations if self._operations else 0.0
                )
            self._operations += 1
            self._processing_time += duration
            self._efficiency_sum += memory_efficiency
            self._utilization_sum += utilization
            if simd:
                self._simd_operations += 1
            if sparse:
                self._sparse_operations += 1

    def record_salience(self, category_index: int, match_score: float, duration: float):
        """Fold a match score into a category's salience."""
        with self.lock:
            self._salience_updates += 1
            self._salience_time += duration
            self._salience_sums[category_index] = (
                self._salience_sums.get(category_index, 0.0) + match_score
            )
            self._salience_counts[category_index] = self._salience_counts.get(category_index, 0) + 1

    def salience(self, category_index: int) -> float:
        with self.lock:
            count = self._salience_counts.get(category_index, 0)
            if count == 0:
                return 0.0
            return self._salience_sums[category_index] / count

    def snapshot(self) -> PerformanceStats:
        """Return an immutable view of the current statistics."""
        with self.lock:
            ops = self._operations
            updates = self._salience_updates
            return PerformanceStats(
                total_operations=ops,
                simd_operations=self._simd_operations,
                average_processing_time=self._processing_time / ops if ops else 0.0,
                average_salience_computation_time=self._salience_time / updates if updates else 0.0,
                statistics_update_count=updates,
                average_category_utilization=self._utilization_sum / ops if ops else 0.0,
                category_salience={
                    index: self._salience_sums[index] / count
                    for index, count in self._salience_counts.items()
                },
                sparse_vector_operations=self._sparse_operations,
                memory_efficiency_ratio=self._efficiency_sum / ops if ops else 0.0,
            )
