"""App configuration for the overlay Django app."""

from __future__ import annotations

import atexit

from django.apps import AppConfig
from django.conf import settings

from .settings_store import SettingsStore


class OverlayConfig(AppConfig):
    """Configuration for the `overlay` app.

    Owns the process-wide SettingsStore: it is loaded once when the app
    registry is ready and flushed when the interpreter exits.
    """

    name = "overlay"
    settings_store: SettingsStore

    def ready(self) -> None:
        """Load the settings store and register the exit flush."""

        self.settings_store = SettingsStore.open(settings.OVERLAY_SETTINGS_FILE)
        atexit.register(self.settings_store.flush)
