"""
Caching infrastructure for prediction results.
"""

import threading
from collections import OrderedDict
from typing import Any, Dict, Hashable, Optional


class LRUCache:
    """
    Thread-safe LRU cache.
    """

    def __init__(self, max_size: int = 1024):
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of entries; 0 disables caching
        """
        self.max_size = max_size
        self.cache: "OrderedDict[Hashable, Any]" = OrderedDict()
        self.lock = threading.RLock()

        # Statistics
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @property
    def enabled(self) -> bool:
        return self.max_size > 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Get value from cache."""
        with self.lock:
            if key not in self.cache:
                self.misses += 1
                return None

            # Move to end (most recently used)
            self.cache.move_to_end(key)
            self.hits += 1
            return self.cache[key]

    def set(self, key: Hashable, value: Any):
        """Set value in cache."""
        if not self.enabled:
            return
        with self.lock:
            if key in self.cache:
                del self.cache[key]

            while len(self.cache) >= self.max_size:
                self.cache.popitem(last=False)
                self.evictions += 1

            self.cache[key] = value

    def resize(self, max_size: int):
        """Change capacity, evicting least recently used entries as needed."""
        with self.lock:
            self.max_size = max_size
            while len(self.cache) > max(max_size, 0):
                self.cache.popitem(last=False)
                self.evictions += 1

    def clear(self):
        """Clear all entries."""
        with self.lock:
            self.cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self.lock:
            total = self.hits + self.misses
            return {
                'size': len(self.cache),
                'max_size': self.max_size,
                'hits': self.hits,
                'misses': self.misses,
                'evictions': self.evictions,
                'hit_rate': (self.hits / total) if total > 0 else 0.0,
            }
