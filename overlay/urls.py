"""URL configuration for overlay API views."""

from __future__ import annotations

from django.urls import path

from overlay import views

app_name = "overlay"

urlpatterns = [
    path("metrics/", views.metric_catalog, name="metric_catalog"),
    path("session/render/", views.render_session, name="render_session"),
    path("pinned/", views.pinned_metrics, name="pinned_metrics"),
    path("preferences/", views.update_preferences, name="update_preferences"),
]
