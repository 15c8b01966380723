"""Service helpers bridging request payloads and the session analysis engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace

from django.apps import apps

from session_analysis.dto import DashboardPreferences, SessionDashboard
from session_analysis.engine import analyze_session
from session_analysis.snapshot import LoadoutInput, SessionInput

from .engine_config import EngineConfig, get_engine_config
from .preferences import load_preferences
from .settings_store import SettingsStore


def get_settings_store() -> SettingsStore:
    """Return the settings store owned by the overlay app config."""

    return apps.get_app_config("overlay").settings_store


def render_session_payload(
    payload: Mapping[str, object],
    *,
    store: SettingsStore,
    engine_config: EngineConfig | None = None,
) -> SessionDashboard:
    """Render a dashboard for a session payload.

    Args:
        payload: Mapping with `session`, `stats` and optional `loadout`,
            `applyMarkup` and `applyAdditionalExpenses` entries.
        store: Settings store holding the persisted preferences.
        engine_config: Optional resolved engine configuration.

    Returns:
        SessionDashboard for the payload. Toggles present in the payload
        override the stored preferences for this render only.
    """

    engine_config = engine_config or get_engine_config()
    preferences = load_preferences(store, default_pinned=engine_config.default_pinned)
    preferences = _apply_toggle_overrides(preferences, payload)

    stats = payload.get("stats")
    session_payload = payload.get("session")
    session = SessionInput.from_payload(
        session_payload if isinstance(session_payload, Mapping) else None,
        stats=stats if isinstance(stats, Mapping) else None,
    )
    return analyze_session(
        session,
        loadout=LoadoutInput.from_payload(payload.get("loadout")),
        preferences=preferences,
        config=engine_config.adjustments,
    )


def _apply_toggle_overrides(preferences: DashboardPreferences, payload: Mapping[str, object]) -> DashboardPreferences:
    """Override adjustment toggles with explicit boolean payload values."""

    apply_markup = payload.get("applyMarkup")
    if isinstance(apply_markup, bool):
        preferences = replace(preferences, apply_markup=apply_markup)
    apply_expenses = payload.get("applyAdditionalExpenses")
    if isinstance(apply_expenses, bool):
        preferences = replace(preferences, apply_additional_expenses=apply_expenses)
    return preferences
