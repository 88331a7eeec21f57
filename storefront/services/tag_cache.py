"""
In-process response cache with tag-based revalidation.

Catalog reads are cached under the cache tags they were fetched with; the
revalidation webhook drops every entry carrying a tag.
"""

import threading
import time
from collections import OrderedDict
from typing import Any, Iterable, Optional


class TagCache:
    """Bounded, expiring cache whose entries carry cache tags."""

    def __init__(self, max_size: int = 512, ttl_seconds: int = 43200):
        self._max_size = max(1, max_size)
        self._ttl_seconds = max(1, ttl_seconds)
        self._store: "OrderedDict[str, tuple]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        now = time.time()
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            expires_at, _, value = item
            if expires_at <= now:
                self._store.pop(key, None)
                return None
            self._store.move_to_end(key)
            return value

    def set(self, key: str, value: Any, tags: Iterable[str] = ()) -> None:
        expires_at = time.time() + self._ttl_seconds
        with self._lock:
            self._store[key] = (expires_at, frozenset(tags), value)
            self._store.move_to_end(key)
            while len(self._store) > self._max_size:
                self._store.popitem(last=False)

    def revalidate_tag(self, tag: str) -> int:
        """
        Drop every entry labelled with tag.

        Returns:
            Number of entries dropped
        """
        with self._lock:
            stale = [key for key, (_, tags, _) in self._store.items() if tag in tags]
            for key in stale:
                del self._store[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
