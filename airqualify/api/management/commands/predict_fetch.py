"""Management command to run one prediction using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from airqualify.api.views import get_prediction_service, parse_location
from airqualify.core import errors
from airqualify.core.services.inference import ModelState


class Command(BaseCommand):
    help = "Predict the air quality for the provided coordinates"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--lat", type=float, help="Latitude")
        parser.add_argument("--lon", type=float, help="Longitude")
        parser.add_argument("--history", action="store_true", help="Print the stored history instead")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        try:
            location = parse_location({"lat": options.get("lat"), "lon": options.get("lon")})
        except errors.ValidationError as exc:
            raise CommandError(str(exc)) from exc

        service = get_prediction_service()
        if options.get("history"):
            payload: Any = [entry.to_payload() for entry in service.history(location)]
        else:
            if service.inference.load() is not ModelState.READY:
                raise CommandError("Model could not be loaded")
            try:
                payload = service.predict(location).to_payload()
            except errors.AirQualifyError as exc:
                raise CommandError(str(exc)) from exc

        self.stdout.write(json.dumps(payload))
