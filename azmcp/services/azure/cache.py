"""Bounded in-memory cache for credentials and clients."""

from collections import OrderedDict
from typing import Any, Dict, Hashable, List, Optional


class LRUCache:
    """LRU cache keyed by hashable values.

    Not locked: callers serialize access (``BaseAzureService`` holds an
    ``asyncio.Lock`` around every read-then-create sequence).
    """

    def __init__(self, max_size: int = 8):
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of items to store in cache
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.cache: OrderedDict = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Get item from cache."""
        if key in self.cache:
            # Move to end (most recently used)
            self.cache.move_to_end(key)
            self.hits += 1
            return self.cache[key]
        self.misses += 1
        return None

    def set(self, key: Hashable, value: Any) -> Optional[Any]:
        """Set item in cache.

        Returns:
            The least recently used value if it was evicted to make room, else None
        """
        evicted = None
        if key in self.cache:
            self.cache.move_to_end(key)
        elif len(self.cache) >= self.max_size:
            _, evicted = self.cache.popitem(last=False)
        self.cache[key] = value
        return evicted

    def values(self) -> List[Any]:
        return list(self.cache.values())

    def clear(self) -> None:
        """Clear all items from cache."""
        self.cache.clear()
        self.hits = 0
        self.misses = 0

    def get_stats(self) -> Dict[str, Any]:
        total = self.hits + self.misses
        return {
            "size": len(self.cache),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total > 0 else 0,
        }

    def __contains__(self, key: Hashable) -> bool:
        return key in self.cache

    def __len__(self) -> int:
        return len(self.cache)
