"""
Bounded thread pool used for parallel category scans.

Results always come back in submission order, so a parallel scan is
indistinguishable from the sequential one.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Any, Callable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


def chunk_bounds(total: int, chunks: int) -> List[range]:
    """Split ``range(total)`` into at most ``chunks`` contiguous ranges."""
    if total <= 0:
        return []
    chunks = max(1, min(chunks, total))
    size, remainder = divmod(total, chunks)
    bounds = []
    start = 0
    for i in range(chunks):
        stop = start + size + (1 if i < remainder else 0)
        bounds.append(range(start, stop))
        start = stop
    return bounds


class ParallelExecutor:
    """
    Thread pool with ordered, chunked map.

    The pool is created lazily on first use. ``shutdown`` may be called any
    number of times.
    """

    def __init__(self, max_workers: int = 1, thread_name_prefix: str = "artcluster"):
        """
        Initialize parallel executor.

        Args:
            max_workers: Maximum number of worker threads
            thread_name_prefix: Prefix for worker thread names
        """
        self.max_workers = max(1, max_workers)
        self.thread_name_prefix = thread_name_prefix

        self._executor: Optional[ThreadPoolExecutor] = None
        self._shutdown = False

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def start(self):
        """Start the executor."""
        if self._shutdown:
            raise RuntimeError("Executor has been shut down")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self.thread_name_prefix,
            )
            logger.debug(f"Started thread pool with {self.max_workers} workers")

    def shutdown(self, wait: bool = True):
        """Shutdown the executor."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
        self._shutdown = True

    def map(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """
        Map function over items in parallel.

        Args:
            func: Function to apply
            items: Items to process

        Returns:
            List of results in original order. The first worker exception is
            re-raised.
        """
        if not items:
            return []

        self.start()
        futures: List[Future] = [self._executor.submit(func, item) for item in items]
        return [future.result() for future in futures]

    def map_chunks(self, func: Callable[[range], List[Any]], total: int) -> List[Any]:
        """
        Apply ``func`` to contiguous index ranges covering ``range(total)``
        and concatenate the per-chunk result lists in order.
        """
        bounds = chunk_bounds(total, self.max_workers)
        results: List[Any] = []
        for chunk in self.map(func, bounds):
            results.extend(chunk)
        return results
