from __future__ import annotations

import threading

from airqualify.core.entities import MeasurementSet, SourceStatus
from airqualify.core.providers.base import ProviderError, RequestConfig
from airqualify.core.providers.openaq import OpenAQProvider
from airqualify.core.providers.openmeteo import OpenMeteoProvider
from airqualify.core.services.aggregator import DataAggregator

from fakes import FakePollutants, FakeWeather


def test_both_providers_ok(aggregator, paris, pollutants, weather):
    readings = aggregator.fetch(paris)

    assert readings.measurements.as_dict() == pollutants.values
    assert readings.sources == (SourceStatus("OpenAQ", True), SourceStatus("Weather", True))
    assert readings.weather.temperature_c == 21.0
    assert pollutants.calls == 1
    assert weather.calls == 1


def test_missing_fields_take_defaults(paris, health):
    aggregator = DataAggregator(
        pollutant_provider=FakePollutants({"pm25": 30.0}),
        weather_provider=FakeWeather(),
        health=health,
    )

    readings = aggregator.fetch(paris)

    assert readings.measurements == MeasurementSet(pm10=10.0, pm25=30.0, no2=5.0, so2=5.0, co=0.2, ozone=10.0)
    assert all(source.ok for source in readings.sources)
    assert health.snapshot()["providers"] == {}


def test_both_providers_failing_never_raises(paris, health):
    aggregator = DataAggregator(
        pollutant_provider=FakePollutants(error=ProviderError("HTTP 503")),
        weather_provider=FakeWeather(error=ValueError("boom")),
        health=health,
    )

    readings = aggregator.fetch(paris)

    assert readings.measurements == MeasurementSet(pm10=10, pm25=10, no2=5, so2=5, co=0.2, ozone=10)
    assert readings.sources == (SourceStatus("OpenAQ", False), SourceStatus("Weather", False))
    assert readings.weather is None
    assert health.snapshot()["providers"] == {"OpenAQ": 1, "Weather": 1}


def test_weather_failure_does_not_change_measurements(paris, pollutants):
    aggregator = DataAggregator(
        pollutant_provider=pollutants,
        weather_provider=FakeWeather(error=ProviderError("timeout")),
    )

    readings = aggregator.fetch(paris)

    assert readings.measurements.as_dict() == pollutants.values
    assert readings.sources == (SourceStatus("OpenAQ", True), SourceStatus("Weather", False))


def test_slow_provider_times_out_into_defaults(paris, health):
    slow = FakePollutants({"pm10": 99.0})
    slow.release = threading.Event()
    aggregator = DataAggregator(
        pollutant_provider=slow,
        weather_provider=FakeWeather(),
        timeout=0.2,
        health=health,
    )
    try:
        readings = aggregator.fetch(paris)
    finally:
        slow.release.set()

    assert readings.measurements == MeasurementSet.defaults()
    assert readings.sources[0] == SourceStatus("OpenAQ", False)
    assert readings.sources[1] == SourceStatus("Weather", True)
    assert health.snapshot()["providers"] == {"OpenAQ": 1}


def test_http_providers_down_use_defaults(requests_mock, paris):
    requests_mock.get("https://openaq.test/v2/latest", status_code=502, text="bad gateway")
    requests_mock.get("https://openmeteo.test/v1/forecast", status_code=500, text="server error")
    config = RequestConfig(retries=0)
    aggregator = DataAggregator(
        pollutant_provider=OpenAQProvider(base_url="https://openaq.test/v2/latest", request_config=config),
        weather_provider=OpenMeteoProvider(base_url="https://openmeteo.test/v1/forecast", request_config=config),
    )

    readings = aggregator.fetch(paris)

    assert readings.measurements.as_dict() == {
        "pm10": 10.0,
        "pm25": 10.0,
        "no2": 5.0,
        "so2": 5.0,
        "co": 0.2,
        "ozone": 10.0,
    }
    assert [source.ok for source in readings.sources] == [False, False]
    assert requests_mock.call_count == 2


def test_hung_provider_does_not_starve_later_fetches(paris, health):
    hung = FakePollutants({"pm10": 99.0})
    hung.release = threading.Event()
    aggregator = DataAggregator(
        pollutant_provider=hung,
        weather_provider=FakeWeather(),
        timeout=0.2,
        health=health,
    )
    try:
        readings = [aggregator.fetch(paris) for _ in range(12)]
    finally:
        hung.release.set()

    assert hung.calls == 12
    assert all(r.sources == (SourceStatus("OpenAQ", False), SourceStatus("Weather", True)) for r in readings)
    assert health.snapshot()["providers"] == {"OpenAQ": 12}
