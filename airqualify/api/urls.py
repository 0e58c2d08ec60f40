"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from airqualify.api.views import AlertsView, HealthView, PredictHistoryView, PredictView

urlpatterns = [
    path("predict", PredictView.as_view(), name="predict"),
    path("predict/history", PredictHistoryView.as_view(), name="predict-history"),
    path("alerts", AlertsView.as_view(), name="alerts"),
    path("admin/health", HealthView.as_view(), name="admin-health"),
]
