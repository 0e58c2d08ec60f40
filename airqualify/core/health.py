"""Process-local health counters served by ``/api/admin/health``.

The aggregator reports upstream failures, the result cache reports lookups
and the inference adapter is polled for its state when a snapshot is taken.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from threading import Lock
from typing import Callable, Dict


ModelProbe = Callable[[], str]


@dataclass(frozen=True)
class CacheStats:
    hits: int = 0
    misses: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses}


class HealthRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._provider_failures: Counter[str] = Counter()
        self._cache = CacheStats()
        self._model_probe: ModelProbe = lambda: "unknown"

    def record_provider_error(self, provider: str, increment: int = 1) -> None:
        if not provider:
            raise ValueError("provider name is required")
        if increment <= 0:
            raise ValueError("increment must be positive")
        with self._lock:
            self._provider_failures[provider] += increment

    def record_cache_lookup(self, *, hit: bool) -> None:
        with self._lock:
            if hit:
                self._cache = replace(self._cache, hits=self._cache.hits + 1)
            else:
                self._cache = replace(self._cache, misses=self._cache.misses + 1)

    @property
    def cache_stats(self) -> CacheStats:
        return self._cache

    def watch_model_state(self, probe: ModelProbe) -> None:
        self._model_probe = probe

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            providers = dict(self._provider_failures)
            cache = self._cache.as_dict()
        return {"providers": providers, "cache": cache, "model": self._model_probe()}


__all__ = ["CacheStats", "HealthRegistry", "ModelProbe"]
