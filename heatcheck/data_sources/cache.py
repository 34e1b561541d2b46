"""
In-memory TTL cache for generated boards and other derived results.

Entries are stored as {"data": ..., "ts": float} and expire after
``ttl_seconds``. The oldest entry is evicted once ``maxsize`` is reached.
Instances are passed in where needed (no module-level cache state), so
tests can use a fake clock and a fresh cache each.
"""
import time
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Optional

from heatcheck.config import BOARD_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = BOARD_CACHE_TTL_SECONDS,
        maxsize: int = 128,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.maxsize = maxsize
        self._clock = clock
        self._store: "OrderedDict[str, dict]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return cached data if fresh, else None."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._clock() - entry["ts"] >= self.ttl_seconds:
                del self._store[key]
                logger.debug(f"[Cache] Expired {key}")
                return None
            self._store.move_to_end(key)
            return entry["data"]

    def set(self, key: str, data: Any) -> None:
        """Store data with the current timestamp."""
        with self._lock:
            self._store[key] = {"data": data, "ts": self._clock()}
            self._store.move_to_end(key)
            while len(self._store) > self.maxsize:
                evicted, _ = self._store.popitem(last=False)
                logger.debug(f"[Cache] Evicted {evicted}")

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._store)
