"""Pydantic models for the upstream payload fields we consume."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class OpenAQMeasurement(_Payload):
    parameter: str
    value: Optional[float] = None

    @field_validator("parameter")
    @classmethod
    def _normalise_parameter(cls, value: str) -> str:
        return value.strip().lower().replace(".", "")


class OpenAQResult(_Payload):
    measurements: List[OpenAQMeasurement] = Field(default_factory=list)


class OpenAQLatestPayload(_Payload):
    results: List[OpenAQResult] = Field(default_factory=list)


class OpenMeteoHourly(_Payload):
    time: List[str] = Field(default_factory=list)
    temperature_2m: List[Optional[float]] = Field(default_factory=list)
    relative_humidity_2m: List[Optional[float]] = Field(default_factory=list)
    wind_speed_10m: List[Optional[float]] = Field(default_factory=list)


class OpenMeteoPayload(_Payload):
    hourly: OpenMeteoHourly


__all__ = [
    "OpenAQLatestPayload",
    "OpenAQMeasurement",
    "OpenAQResult",
    "OpenMeteoHourly",
    "OpenMeteoPayload",
]
