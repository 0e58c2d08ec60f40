"""Per-key in-flight registry so duplicate concurrent work runs once."""
from __future__ import annotations

import logging
from concurrent.futures import Future
from threading import Lock
from typing import Callable, Dict, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class SingleFlight(Generic[T]):
    """Coalesce concurrent calls sharing a key into a single execution.

    The first caller for a key (the leader) runs ``func``; callers arriving
    while it runs wait on the leader's future and receive its result or
    exception.  The key is released as soon as the leader finishes.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._inflight: Dict[str, "Future[T]"] = {}

    def do(self, key: str, func: Callable[[], T]) -> T:
        with self._lock:
            future = self._inflight.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._inflight[key] = future

        if not leader:
            logger.debug("Joining in-flight computation for %s", key)
            return future.result()

        try:
            result = func()
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._inflight.pop(key, None)

    def in_flight(self, key: str) -> bool:
        with self._lock:
            return key in self._inflight


__all__ = ["SingleFlight"]
