"""OpenAQ pollutant provider."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from pydantic import ValidationError as PayloadError

from .base import HTTPProvider, ProviderError
from .schemas import OpenAQLatestPayload
from ..entities import Location


# OpenAQ parameter name -> measurement field
PARAMETERS = {
    "pm10": "pm10",
    "pm25": "pm25",
    "no2": "no2",
    "so2": "so2",
    "co": "co",
    "o3": "ozone",
}


class OpenAQProvider(HTTPProvider):
    """Latest ground-station measurements around a coordinate."""

    name = "OpenAQ"
    base_url = "https://api.openaq.org/v2/latest"

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        api_key: str = "",
        radius_m: int = 5000,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self.api_key = api_key
        self.radius_m = radius_m
        self._log = logging.getLogger(self.__class__.__name__)

    def get_measurements(self, location: Location) -> Dict[str, float]:
        params = {
            "coordinates": f"{location.latitude},{location.longitude}",
            "radius": self.radius_m,
        }
        headers = {"X-API-Key": self.api_key} if self.api_key else {}
        response = self._request("GET", self.base_url, params=params, headers=headers)
        try:
            payload = OpenAQLatestPayload.model_validate(self._json(response))
        except PayloadError as exc:
            self._log.error("Malformed OpenAQ payload: %s", exc)
            raise ProviderError("malformed payload") from exc

        if not payload.results:
            self._log.info("No OpenAQ stations within %sm of %s", self.radius_m, location.key)
            return {}

        found: Dict[str, float] = {}
        for measurement in payload.results[0].measurements:
            field = PARAMETERS.get(measurement.parameter)
            if field is None or field in found or measurement.value is None:
                continue
            found[field] = measurement.value
        return found


__all__ = ["OpenAQProvider", "PARAMETERS"]
