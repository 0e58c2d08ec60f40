from __future__ import annotations

from uuid import uuid4

import pytest
from django.core.cache.backends.locmem import LocMemCache

from airqualify.core.cache import ResultCache
from airqualify.core.entities import Location
from airqualify.core.health import HealthRegistry
from airqualify.core.history import HistoryStore
from airqualify.core.services.aggregator import DataAggregator
from airqualify.core.services.inference import InferenceAdapter
from airqualify.core.services.prediction import PredictionService

from fakes import FakePollutants, FakeSession, FakeWeather, TimeController


@pytest.fixture
def clock() -> TimeController:
    return TimeController()


@pytest.fixture
def backend() -> LocMemCache:
    return LocMemCache(f"test-{uuid4().hex}", {})


@pytest.fixture
def health() -> HealthRegistry:
    return HealthRegistry()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def inference(session) -> InferenceAdapter:
    adapter = InferenceAdapter(lambda: session)
    adapter.load()
    return adapter


@pytest.fixture
def pollutants() -> FakePollutants:
    return FakePollutants({"pm10": 21.0, "pm25": 12.5, "no2": 7.0, "so2": 1.5, "co": 0.4, "ozone": 30.0})


@pytest.fixture
def weather() -> FakeWeather:
    return FakeWeather()


@pytest.fixture
def aggregator(pollutants, weather, health) -> DataAggregator:
    return DataAggregator(
        pollutant_provider=pollutants,
        weather_provider=weather,
        timeout=2.0,
        health=health,
    )


@pytest.fixture
def make_service(backend, clock, health, aggregator, inference):
    def factory(**overrides) -> PredictionService:
        options = dict(
            cache=ResultCache(backend, clock=clock, health=health),
            history=HistoryStore(backend, clock=clock),
            aggregator=aggregator,
            inference=inference,
            clock=clock,
        )
        options.update(overrides)
        return PredictionService(**options)

    return factory


@pytest.fixture
def service(make_service) -> PredictionService:
    return make_service()


@pytest.fixture
def paris() -> Location:
    return Location.parse("48.8566", "2.3522")
