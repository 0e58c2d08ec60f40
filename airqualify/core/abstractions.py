"""Core abstractions for the air-quality domain."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .entities import Location, WeatherSnapshot


class PollutantProvider(Protocol):
    """A data source returning raw pollutant readings for a coordinate."""

    name: str

    def get_measurements(self, location: Location) -> Dict[str, float]:
        """Return the pollutant values found, keyed by measurement field name."""
        ...


class WeatherProvider(Protocol):
    """A data source returning current weather for a coordinate."""

    name: str

    def get_weather(self, location: Location) -> WeatherSnapshot:
        """Fetch a single weather snapshot for the provided coordinates."""
        ...


class ModelSession(Protocol):
    """The subset of ``onnxruntime.InferenceSession`` used for inference."""

    def get_outputs(self) -> Sequence[Any]:
        ...

    def run(self, output_names: Optional[List[str]], input_feed: Mapping[str, Any]) -> List[Any]:
        ...


__all__ = ["ModelSession", "PollutantProvider", "WeatherProvider"]
