"""Short-lived cache for upstream reference data.

Staleness bound: an entry is served for at most ``ttl_seconds`` after it was
written. Refreshes are last-write-wins; two callers racing past an expired
entry may both load, and whichever finishes last is kept. Loaders run
outside the lock so a slow upstream never blocks readers of other keys.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from core.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Entry:
    value: Any
    stored_at: float


class TTLCache:
    """Thread-safe key/value cache with a fixed time-to-live."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, _Entry] = {}
        self.hits = 0
        self.misses = 0

    def _is_fresh(self, entry: _Entry) -> bool:
        return (self._clock() - entry.stored_at) < self.ttl_seconds

    def get(self, key: Hashable) -> Optional[Any]:
        """Cached value, or None if missing or stale."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry):
                self.hits += 1
                return entry.value
            self.misses += 1
            return None

    def get_stale(self, key: Hashable) -> Optional[Any]:
        """Last stored value regardless of age."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.value if entry is not None else None

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def age(self, key: Hashable) -> Optional[float]:
        with self._lock:
            entry = self._entries.get(key)
            return None if entry is None else self._clock() - entry.stored_at

    def get_or_refresh(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        Return the fresh value for key, loading it when missing or expired.

        If the loader fails and an older value exists, the older value is
        served and the error is logged. With nothing cached the error
        propagates.
        """
        value = self.get(key)
        if value is not None:
            return value
        try:
            value = loader()
        except Exception as e:
            stale = self.get_stale(key)
            if stale is None:
                raise
            logger.warning("[CACHE] refresh of %s failed, serving stale value: %s", key, e)
            return stale
        self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "ttl_seconds": self.ttl_seconds,
            }
