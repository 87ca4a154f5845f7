"""Bounded LRU cache of decoded source images.

Shared by every request in the process. Each operation is a single critical
section under one lock; callers do their fetch/decode work between a
``lookup`` miss and the following ``insert`` without holding it.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any

from PIL import Image

logger = logging.getLogger(__name__)


class MemoryImageCache:
    """
    Recency-ordered cache of decoded originals keyed by source URL.

    The ``OrderedDict`` keeps least-recently-used entries first; both
    ``lookup`` hits and ``insert`` move an entry to the end.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[str, Image.Image] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def lookup(self, url: str) -> Image.Image | None:
        """Return the decoded image for ``url`` and mark it most recently used."""
        with self._lock:
            image = self._entries.get(url)
            if image is None:
                self._misses += 1
                return None
            self._entries.move_to_end(url)
            self._hits += 1
            return image

    def insert(self, url: str, image: Image.Image) -> None:
        """
        Store a decoded image as most recently used.

        An existing entry for ``url`` is replaced in place (never duplicated);
        otherwise the least-recently-used entry is evicted when full.
        """
        with self._lock:
            if url in self._entries:
                self._entries[url] = image
                self._entries.move_to_end(url)
                return

            if len(self._entries) >= self._capacity:
                evicted_url, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Memory cache evicted {evicted_url}")

            self._entries[url] = image

    def urls(self) -> list[str]:
        """Cached URLs from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> int:
        """Drop every entry. Returns count cleared."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
