"""Rolling per-location history of past predictions."""
from __future__ import annotations

from threading import Lock
from typing import List

from django.core.cache.backends.base import BaseCache

from .cache import ExpiringStore
from .clock import Clock, system_clock
from .entities import HistoryEntry


class HistoryStore:
    """Keeps the last ``max_entries`` predictions per location.

    The whole series shares one TTL which restarts on every append, so a
    location's history disappears ``ttl`` seconds after its last write.
    """

    DEFAULT_TTL = 24 * 60 * 60
    DEFAULT_MAX_ENTRIES = 30

    def __init__(
        self,
        backend: BaseCache,
        *,
        ttl: float = DEFAULT_TTL,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock = system_clock,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._store = ExpiringStore(backend, ttl=ttl, key_prefix="h:", clock=clock)
        self._max_entries = max_entries
        self._lock = Lock()

    def append(self, key: str, entry: HistoryEntry) -> None:
        with self._lock:
            series = list(self._store.get(key) or [])
            series.append(entry.to_payload())
            if len(series) > self._max_entries:
                series = series[-self._max_entries:]
            self._store.set(key, series)

    def get(self, key: str) -> List[HistoryEntry]:
        series = self._store.get(key) or []
        return [HistoryEntry.from_payload(item) for item in series]


__all__ = ["HistoryStore"]
