"""Fetch pollutant and weather readings in parallel, tolerating failures."""
from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..abstractions import PollutantProvider, WeatherProvider
from ..entities import Location, MeasurementSet, SourceStatus, WeatherSnapshot
from ..health import HealthRegistry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatedReadings:
    measurements: MeasurementSet
    sources: Tuple[SourceStatus, ...]
    # Reported through ``sources`` only; the model never sees weather.
    weather: Optional[WeatherSnapshot] = None


class DataAggregator:
    """Combine the pollutant and weather providers for one location.

    Both providers are queried concurrently on a pool owned by the call.  A
    provider that raises or does not answer within ``timeout`` seconds is
    marked ``ok=False`` and its pollutant fields fall back to
    :attr:`MeasurementSet.DEFAULTS`.
    :meth:`fetch` never raises because of a provider.
    """

    def __init__(
        self,
        *,
        pollutant_provider: PollutantProvider,
        weather_provider: WeatherProvider,
        timeout: float = 10.0,
        health: Optional[HealthRegistry] = None,
    ) -> None:
        self._pollutants = pollutant_provider
        self._weather = weather_provider
        self._timeout = timeout
        self._health = health

    @property
    def timeout(self) -> float:
        return self._timeout

    def fetch(self, location: Location) -> AggregatedReadings:
        deadline = time.monotonic() + self._timeout
        # A call left running past the deadline only holds this pool's worker.
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="aggregator")
        try:
            pollutant_future = executor.submit(self._pollutants.get_measurements, location)
            weather_future = executor.submit(self._weather.get_weather, location)
            raw, pollutants_ok = self._collect(self._pollutants.name, pollutant_future, deadline)
            weather, weather_ok = self._collect(self._weather.name, weather_future, deadline)
        finally:
            executor.shutdown(wait=False)

        measurements = MeasurementSet.from_partial(raw if pollutants_ok else None)
        sources = (
            SourceStatus(name=self._pollutants.name, ok=pollutants_ok),
            SourceStatus(name=self._weather.name, ok=weather_ok),
        )
        if not pollutants_ok:
            logger.warning("Using default pollutant values for %s", location.key)
        return AggregatedReadings(
            measurements=measurements,
            sources=sources,
            weather=weather if weather_ok else None,
        )

    def _collect(self, name: str, future: Future, deadline: float) -> Tuple[Any, bool]:
        remaining = max(deadline - time.monotonic(), 0.0)
        try:
            return future.result(timeout=remaining), True
        except FutureTimeout:
            logger.warning("Provider %s timed out after %.1fs", name, self._timeout)
        except Exception as exc:  # noqa: BLE001 - provider failures are absorbed
            logger.warning("Provider %s failed: %s", name, exc)
        if self._health is not None:
            self._health.record_provider_error(name)
        return None, False


__all__ = ["AggregatedReadings", "DataAggregator"]
