"""Open-Meteo weather provider."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError as PayloadError

from .base import HTTPProvider, ProviderError
from .schemas import OpenMeteoPayload
from ..entities import Location, WeatherSnapshot


def _kmh_to_ms(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return round(value / 3.6, 2)


class OpenMeteoProvider(HTTPProvider):
    name = "Weather"
    base_url = "https://api.open-meteo.com/v1/forecast"
    hourly_variables = ("temperature_2m", "relative_humidity_2m", "wind_speed_10m")

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self._log = logging.getLogger(self.__class__.__name__)

    def get_weather(self, location: Location) -> WeatherSnapshot:
        params = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "hourly": ",".join(self.hourly_variables),
            "timezone": "UTC",
        }
        response = self._request("GET", self.base_url, params=params)
        try:
            payload = OpenMeteoPayload.model_validate(self._json(response))
        except PayloadError as exc:
            self._log.error("Malformed Open-Meteo payload: %s", exc)
            raise ProviderError("malformed payload") from exc

        hourly = payload.hourly
        if not hourly.time:
            raise ProviderError("missing hourly data")
        return WeatherSnapshot(
            temperature_c=_safe_index(hourly.temperature_2m, 0),
            humidity_percent=_safe_index(hourly.relative_humidity_2m, 0),
            wind_speed_ms=_kmh_to_ms(_safe_index(hourly.wind_speed_10m, 0)),
            observed_at=self._parse_time(hourly.time[0]),
        )

    def _parse_time(self, value: str) -> Optional[datetime]:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


def _safe_index(values: List[Optional[float]], index: int) -> Optional[float]:
    try:
        return values[index]
    except IndexError:
        return None


__all__ = ["OpenMeteoProvider"]
