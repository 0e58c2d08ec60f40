from __future__ import annotations

from django.apps import AppConfig
from django.conf import settings


class ApiConfig(AppConfig):
    name = "airqualify.api"
    label = "airqualify_api"

    def ready(self) -> None:
        if not settings.MODEL_AUTOLOAD:
            return
        from airqualify.api.views import get_prediction_service

        get_prediction_service().inference.start_loading()
