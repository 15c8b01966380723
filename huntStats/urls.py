"""URL configuration for huntStats."""

from __future__ import annotations

from django.urls import include, path

urlpatterns = [
    path("api/", include("overlay.urls")),
]
