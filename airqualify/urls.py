"""Root URL configuration."""
from __future__ import annotations

from django.urls import include, path

from airqualify.api.views import index

urlpatterns = [
    path("", index, name="index"),
    path("api/", include("airqualify.api.urls")),
]
