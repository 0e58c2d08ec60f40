from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from .errors import ValidationError


@dataclass(frozen=True)
class Location:
    """A queried coordinate pair.

    The cache/history key is derived from the coordinates rounded to a fixed
    number of decimal places so that ``1.0`` and ``1.00001`` (or ``-0.0`` and
    ``0.0``) address the same entries.
    """

    latitude: float
    longitude: float
    precision: int = field(default=4, compare=False)

    @classmethod
    def parse(cls, lat: Any, lon: Any, precision: int = 4) -> "Location":
        if _is_missing(lat) or _is_missing(lon):
            raise ValidationError("lat & lon required")
        if isinstance(lat, bool) or isinstance(lon, bool):
            raise ValidationError("lat and lon must be valid floating point numbers")
        try:
            latitude = float(lat)
            longitude = float(lon)
        except (TypeError, ValueError) as exc:
            raise ValidationError("lat and lon must be valid floating point numbers") from exc
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise ValidationError("lat and lon must be finite numbers")
        if not -90.0 <= latitude <= 90.0:
            raise ValidationError("lat must be between -90 and 90")
        if not -180.0 <= longitude <= 180.0:
            raise ValidationError("lon must be between -180 and 180")
        return cls(latitude=latitude, longitude=longitude, precision=precision)

    @property
    def key(self) -> str:
        lat = round(self.latitude, self.precision) + 0.0
        lon = round(self.longitude, self.precision) + 0.0
        return f"{lat:.{self.precision}f}:{lon:.{self.precision}f}"

    def as_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lon": self.longitude}


@dataclass(frozen=True)
class MeasurementSet:
    """Pollutant readings in the order the model expects them."""

    FIELDS: ClassVar[Tuple[str, ...]] = ("pm10", "pm25", "no2", "so2", "co", "ozone")
    DEFAULTS: ClassVar[Dict[str, float]] = {
        "pm10": 10.0,
        "pm25": 10.0,
        "no2": 5.0,
        "so2": 5.0,
        "co": 0.2,
        "ozone": 10.0,
    }

    pm10: float
    pm25: float
    no2: float
    so2: float
    co: float
    ozone: float

    @classmethod
    def defaults(cls) -> "MeasurementSet":
        return cls(**cls.DEFAULTS)

    @classmethod
    def from_partial(cls, values: Optional[Mapping[str, Any]]) -> "MeasurementSet":
        """Build a full set, substituting defaults for missing or unusable values."""
        values = values or {}
        resolved = {}
        for name in cls.FIELDS:
            value = _non_negative_float(values.get(name))
            resolved[name] = cls.DEFAULTS[name] if value is None else value
        return cls(**resolved)

    def as_features(self) -> Tuple[float, ...]:
        return tuple(getattr(self, name) for name in self.FIELDS)

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in self.FIELDS}


@dataclass(frozen=True)
class SourceStatus:
    name: str
    ok: bool

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ok": self.ok}


@dataclass(frozen=True)
class WeatherSnapshot:
    """Weather reported alongside a prediction; never used as a model feature."""

    temperature_c: Optional[float]
    humidity_percent: Optional[float]
    wind_speed_ms: Optional[float]
    observed_at: Optional[datetime] = None


@dataclass(frozen=True)
class PredictionResult:
    location: Location
    timestamp: datetime
    aqi: float
    alert_message: str
    measurements: MeasurementSet
    sources: Tuple[SourceStatus, ...]

    def to_payload(self, cached: bool = False) -> Dict[str, Any]:
        """Render the JSON body returned by ``/api/predict``."""
        payload: Dict[str, Any] = {
            "location": self.location.as_dict(),
            "ts": _isoformat(self.timestamp),
            "aqi": self.aqi,
            "alert": self.alert_message,
        }
        payload.update(self.measurements.as_dict())
        payload["sources"] = [source.as_dict() for source in self.sources]
        if cached:
            payload["cached"] = True
        return payload

    def serialize(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        return payload

    @classmethod
    def deserialize(cls, payload: Mapping[str, Any]) -> "PredictionResult":
        return cls(
            location=Location(**payload["location"]),
            timestamp=datetime.fromisoformat(payload["timestamp"]),
            aqi=payload["aqi"],
            alert_message=payload["alert_message"],
            measurements=MeasurementSet(**payload["measurements"]),
            sources=tuple(SourceStatus(**source) for source in payload["sources"]),
        )


@dataclass(frozen=True)
class HistoryEntry:
    date: date
    aqi: float
    measurements: MeasurementSet

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"date": self.date.isoformat(), "aqi": self.aqi}
        payload.update(self.measurements.as_dict())
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "HistoryEntry":
        return cls(
            date=date.fromisoformat(payload["date"]),
            aqi=payload["aqi"],
            measurements=MeasurementSet(**{name: payload[name] for name in MeasurementSet.FIELDS}),
        )


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _non_negative_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _isoformat(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "HistoryEntry",
    "Location",
    "MeasurementSet",
    "PredictionResult",
    "SourceStatus",
    "WeatherSnapshot",
]
