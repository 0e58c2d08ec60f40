from __future__ import annotations

import pytest

from airqualify.core.services.alerts import classify_coarse, classify_fine, get_classifier


@pytest.mark.parametrize(
    "aqi, prefix",
    [
        (0, "Good"),
        (50, "Good"),
        (50.01, "Moderate"),
        (100, "Moderate"),
        (100.01, "Poor"),
        (150, "Poor"),
        (150.01, "Very poor"),
        (200, "Very poor"),
        (200.01, "Dangerous"),
        (-25, "Good"),
        (1e9, "Dangerous"),
    ],
)
def test_fine_tiers(aqi, prefix) -> None:
    assert classify_fine(aqi).startswith(prefix)


@pytest.mark.parametrize(
    "aqi, expected",
    [
        (100, {"alert": False}),
        (-5, {"alert": False}),
        (100.5, {"alert": True, "level": "Moderate", "message": "Consider reducing outdoor exercise"}),
        (150, {"alert": True, "level": "Moderate", "message": "Consider reducing outdoor exercise"}),
        (150.5, {"alert": True, "level": "Unhealthy", "message": "Avoid outdoor activity"}),
        (10_000, {"alert": True, "level": "Unhealthy", "message": "Avoid outdoor activity"}),
    ],
)
def test_coarse_tiers(aqi, expected) -> None:
    assert classify_coarse(aqi) == expected


def test_classifiers_are_selected_by_name() -> None:
    assert get_classifier("fine") is classify_fine
    assert get_classifier("coarse") is classify_coarse
    with pytest.raises(ValueError):
        get_classifier("medium")
