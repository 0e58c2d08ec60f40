"""Prediction orchestration: cache, aggregate, infer, classify, record."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from ..cache import ResultCache
from ..clock import Clock, system_clock
from ..entities import HistoryEntry, Location, PredictionResult
from ..history import HistoryStore
from ..singleflight import SingleFlight
from .aggregator import DataAggregator
from .alerts import get_classifier
from .inference import InferenceAdapter


logger = logging.getLogger(__name__)


class AqiSource(Protocol):
    """Anything able to produce an AQI for a location (local or remote)."""

    def predict_aqi(self, location: Location) -> float:
        ...


@dataclass(frozen=True)
class PredictionOutcome:
    result: PredictionResult
    cached: bool

    def to_payload(self) -> Dict[str, Any]:
        return self.result.to_payload(cached=self.cached)


class PredictionService:
    """Entry point for the prediction, history and alert endpoints.

    ``predict`` returns a cached result when one is fresh.  Otherwise it runs
    the compute flow (aggregate, infer, classify, cache, record) under a
    per-location single-flight guard so that concurrent misses for the same
    key share one computation.  A failure in the compute flow leaves both the
    cache and the history untouched.
    """

    def __init__(
        self,
        *,
        cache: ResultCache,
        history: HistoryStore,
        aggregator: DataAggregator,
        inference: InferenceAdapter,
        clock: Clock = system_clock,
        prediction_classifier: str = "fine",
        alert_classifier: str = "coarse",
        alert_source: Optional[AqiSource] = None,
    ) -> None:
        self.cache = cache
        self.history_store = history
        self.aggregator = aggregator
        self.inference = inference
        self._clock = clock
        self._classify_prediction = get_classifier(prediction_classifier)
        self._classify_alert = get_classifier(alert_classifier)
        self._alert_source = alert_source
        self._flights: SingleFlight[PredictionOutcome] = SingleFlight()

    # Public API ---------------------------------------------------------
    def predict(self, location: Location) -> PredictionOutcome:
        key = location.key
        cached = self.cache.get(key)
        if cached is not None:
            return PredictionOutcome(result=cached, cached=True)
        return self._flights.do(key, lambda: self._compute(location))

    def predict_aqi(self, location: Location) -> float:
        return self.predict(location).result.aqi

    def history(self, location: Location) -> List[HistoryEntry]:
        return self.history_store.get(location.key)

    def alert(self, location: Location) -> Dict[str, Any]:
        source = self._alert_source or self
        return self._classify_alert(source.predict_aqi(location))

    # Helpers ------------------------------------------------------------
    def _compute(self, location: Location) -> PredictionOutcome:
        key = location.key
        # A flight that finished just before this one may already have stored it.
        cached = self.cache.peek(key)
        if cached is not None:
            return PredictionOutcome(result=cached, cached=True)

        readings = self.aggregator.fetch(location)
        aqi = self.inference.predict(readings.measurements)
        now = self._clock()
        result = PredictionResult(
            location=location,
            timestamp=now,
            aqi=aqi,
            alert_message=self._classify_prediction(aqi),
            measurements=readings.measurements,
            sources=readings.sources,
        )
        self.cache.set(key, result)
        self.history_store.append(
            key, HistoryEntry(date=now.date(), aqi=aqi, measurements=readings.measurements)
        )
        logger.info("Predicted AQI %.1f for %s", aqi, key)
        return PredictionOutcome(result=result, cached=False)


__all__ = ["AqiSource", "PredictionOutcome", "PredictionService"]
