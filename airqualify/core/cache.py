from __future__ import annotations

import logging
from typing import Any, Optional

from django.core.cache.backends.base import BaseCache

from .clock import Clock, system_clock
from .entities import PredictionResult
from .health import HealthRegistry


class ExpiringStore:
    """TTL key/value store on top of a Django cache backend.

    Expiry is decided against the injected clock, not the backend's own
    timer: every entry carries ``expires_at`` and a read past it is a miss
    that also deletes the entry.
    """

    def __init__(
        self,
        backend: BaseCache,
        *,
        ttl: float,
        key_prefix: str = "",
        clock: Clock = system_clock,
    ) -> None:
        self._backend = backend
        self._ttl = ttl
        self._key_prefix = key_prefix
        self._clock = clock

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any:
        storage_key = self._storage_key(key)
        item = self._backend.get(storage_key)
        if not item:
            return None
        if item["expires_at"] <= self._now():
            self._backend.delete(storage_key)
            return None
        return item["value"]

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self._ttl if ttl is None else ttl
        item = {"value": value, "expires_at": self._now() + ttl}
        # The backend timeout only reclaims memory; expiry is checked on read.
        self._backend.set(self._storage_key(key), item, timeout=max(int(ttl) + 1, 1))

    def _storage_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def _now(self) -> float:
        return self._clock().timestamp()


class ResultCache:
    """Memo of full prediction results keyed by canonical location."""

    DEFAULT_TTL = 60

    def __init__(
        self,
        backend: BaseCache,
        *,
        ttl: float = DEFAULT_TTL,
        clock: Clock = system_clock,
        health: Optional[HealthRegistry] = None,
    ) -> None:
        self._store = ExpiringStore(backend, ttl=ttl, key_prefix="p:", clock=clock)
        self._health = health
        self._log = logging.getLogger(self.__class__.__name__)

    def get(self, key: str) -> Optional[PredictionResult]:
        payload = self._store.get(key)
        if payload is None:
            self._record(hit=False)
            return None
        self._record(hit=True)
        self._log.debug("Prediction cache hit for %s", key)
        return PredictionResult.deserialize(payload)

    def peek(self, key: str) -> Optional[PredictionResult]:
        """Look up without touching the hit/miss counters."""
        payload = self._store.get(key)
        return None if payload is None else PredictionResult.deserialize(payload)

    def set(self, key: str, value: PredictionResult, ttl: Optional[float] = None) -> None:
        self._store.set(key, value.serialize(), ttl)

    def _record(self, *, hit: bool) -> None:
        if self._health is not None:
            self._health.record_cache_lookup(hit=hit)


__all__ = ["ExpiringStore", "ResultCache"]
