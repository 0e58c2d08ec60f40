"""AQI source that calls another instance's ``/api/predict`` endpoint."""
from __future__ import annotations

import logging
from typing import Optional

import requests

from ..entities import Location
from ..providers.base import ProviderError


class RemotePredictor:
    def __init__(
        self,
        url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout
        self._log = logging.getLogger(self.__class__.__name__)

    def predict_aqi(self, location: Location) -> float:
        response = self.session.post(self.url, json=location.as_dict(), timeout=self.timeout)
        response.raise_for_status()
        try:
            return float(response.json()["aqi"])
        except (ValueError, KeyError, TypeError) as exc:
            self._log.error("Remote prediction returned an unusable body: %s", response.text[:200])
            raise ProviderError("remote prediction has no aqi") from exc


__all__ = ["RemotePredictor"]
