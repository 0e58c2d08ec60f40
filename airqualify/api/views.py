"""REST API views for predictions, history and alerts."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache

from django.conf import settings
from django.core.cache import caches
from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from airqualify.core import errors
from airqualify.core.cache import ResultCache
from airqualify.core.entities import Location
from airqualify.core.health import HealthRegistry
from airqualify.core.history import HistoryStore
from airqualify.core.providers.base import RequestConfig
from airqualify.core.providers.openaq import OpenAQProvider
from airqualify.core.providers.openmeteo import OpenMeteoProvider
from airqualify.core.services.aggregator import DataAggregator
from airqualify.core.services.inference import InferenceAdapter
from airqualify.core.services.prediction import PredictionService
from airqualify.core.services.remote import RemotePredictor


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_health_registry() -> HealthRegistry:
    return HealthRegistry()


@lru_cache(maxsize=1)
def get_prediction_service() -> PredictionService:
    backend = caches[settings.PREDICTION_CACHE_ALIAS]
    health = get_health_registry()
    request_config = RequestConfig(
        timeout=settings.UPSTREAM_TIMEOUT,
        retries=settings.UPSTREAM_RETRIES,
    )
    aggregator = DataAggregator(
        pollutant_provider=OpenAQProvider(
            base_url=settings.OPENAQ_URL,
            api_key=settings.OPENAQ_API_KEY,
            radius_m=settings.OPENAQ_RADIUS,
            request_config=request_config,
        ),
        weather_provider=OpenMeteoProvider(
            base_url=settings.OPENMETEO_URL,
            request_config=request_config,
        ),
        # Never give up on a provider before its own retries could finish.
        timeout=max(settings.AGGREGATOR_TIMEOUT, request_config.max_duration()),
        health=health,
    )
    inference = InferenceAdapter.from_path(settings.MODEL_PATH)
    health.watch_model_state(lambda: inference.state.value)
    alert_source = None
    if settings.PREDICT_URL:
        alert_source = RemotePredictor(settings.PREDICT_URL, timeout=settings.AGGREGATOR_TIMEOUT)
    return PredictionService(
        cache=ResultCache(backend, ttl=settings.PREDICTION_CACHE_TTL, health=health),
        history=HistoryStore(
            backend,
            ttl=settings.HISTORY_TTL,
            max_entries=settings.HISTORY_MAX_ENTRIES,
        ),
        aggregator=aggregator,
        inference=inference,
        alert_source=alert_source,
    )


def parse_location(*sources: Mapping) -> Location:
    """Read ``lat``/``lon`` from the first source that carries them."""
    lat = lon = None
    for source in sources:
        if lat is None:
            lat = source.get("lat")
        if lon is None:
            lon = source.get("lon")
    return Location.parse(lat, lon, precision=settings.COORDINATE_PRECISION)


def _bad_request(exc: errors.ValidationError) -> Response:
    return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def index(request):
    return HttpResponse("Air-Qualify Backend is running", content_type="text/plain")


class PredictView(APIView):
    """Predict the AQI for the posted coordinates."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        body = request.data if isinstance(request.data, Mapping) else {}
        try:
            location = parse_location(body, request.query_params)
        except errors.ValidationError as exc:
            return _bad_request(exc)

        try:
            outcome = get_prediction_service().predict(location)
        except errors.AirQualifyError as exc:
            logger.error("Prediction error for %s: %s", location.key, exc)
            return Response(
                {"error": "internal_error", "details": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        except Exception:
            logger.exception("Unexpected prediction error for %s", location.key)
            return Response({"error": "internal_error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(outcome.to_payload(), status=status.HTTP_200_OK)


class PredictHistoryView(APIView):
    """Return the rolling prediction history for the coordinates."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        try:
            location = parse_location(request.query_params)
        except errors.ValidationError as exc:
            return _bad_request(exc)
        entries = get_prediction_service().history(location)
        return Response([entry.to_payload() for entry in entries], status=status.HTTP_200_OK)


class AlertsView(APIView):
    """Return a coarse alert level for the coordinates."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        try:
            location = parse_location(request.query_params)
        except errors.ValidationError as exc:
            return _bad_request(exc)
        try:
            payload = get_prediction_service().alert(location)
        except Exception:
            logger.exception("Alert computation failed for %s", location.key)
            return Response({"error": "alert_fail"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(payload, status=status.HTTP_200_OK)


class HealthView(APIView):
    """Provider error counters, cache stats and model state."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        return Response(get_health_registry().snapshot(), status=status.HTTP_200_OK)
