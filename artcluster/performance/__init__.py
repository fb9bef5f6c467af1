"""Performance statistics, parallel execution and caching."""

from .stats import PerformanceStats, PerformanceTracker
from .parallel import ParallelExecutor, chunk_bounds
from .cache import LRUCache

__all__ = [
    "PerformanceStats",
    "PerformanceTracker",
    "ParallelExecutor",
    "chunk_bounds",
    "LRUCache",
]
