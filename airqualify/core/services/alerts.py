"""AQI tier tables.

Two independent tables: ``fine`` labels every prediction
and ``coarse`` drives the alert endpoint.  Their boundaries differ (``<=`` for
fine, strict ``>`` for coarse) and must not be unified.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

FINE_TIERS: Tuple[Tuple[float, str], ...] = (
    (50, "Good air quality, enjoy your day!"),
    (100, "Moderate air quality, sensitive groups should reduce outdoor exertion."),
    (150, "Poor quality, avoid prolonged efforts outdoors."),
    (200, "Very poor quality, stay indoors"),
)
FINE_FALLBACK = "Dangerous air, protect yourself seriously"

COARSE_TIERS: Tuple[Tuple[float, str, str], ...] = (
    (150, "Unhealthy", "Avoid outdoor activity"),
    (100, "Moderate", "Consider reducing outdoor exercise"),
)


def classify_fine(aqi: float) -> str:
    for upper, message in FINE_TIERS:
        if aqi <= upper:
            return message
    return FINE_FALLBACK


def classify_coarse(aqi: float) -> Dict[str, Any]:
    for lower, level, message in COARSE_TIERS:
        if aqi > lower:
            return {"alert": True, "level": level, "message": message}
    return {"alert": False}


CLASSIFIERS: Dict[str, Callable[[float], Any]] = {
    "fine": classify_fine,
    "coarse": classify_coarse,
}


def get_classifier(name: str) -> Callable[[float], Any]:
    try:
        return CLASSIFIERS[name]
    except KeyError:
        raise ValueError(f"unknown classifier {name!r}") from None


__all__ = ["CLASSIFIERS", "classify_coarse", "classify_fine", "get_classifier"]
