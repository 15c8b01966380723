"""JSON API views consumed by the overlay UI layer."""

from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from session_analysis.dto import DashboardPreferences
from session_analysis.metrics import DEFAULT_REGISTRY
from session_analysis.pinned import PinnedMetrics

from .engine_config import get_engine_config
from .preferences import (
    UnknownMetricError,
    load_preferences,
    replace_pinned_metric,
    save_pinned_metrics,
    set_adjustment_toggles,
    toggle_pinned_metric,
)
from .services import get_settings_store, render_session_payload
from .settings_store import SettingsStore


def _json_body(request: HttpRequest) -> dict[str, Any] | None:
    """Decode a JSON object request body, or return None when malformed."""

    try:
        payload = json.loads(request.body or b"{}")
    except (UnicodeDecodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def _bad_request(error: str) -> JsonResponse:
    return JsonResponse({"ok": False, "error": error}, status=400)


def _preferences_json(preferences: DashboardPreferences) -> dict[str, Any]:
    return {
        "ok": True,
        "pinned": preferences.pinned.to_value(),
        "applyMarkup": preferences.apply_markup,
        "applyAdditionalExpenses": preferences.apply_additional_expenses,
    }


@require_GET
def metric_catalog(request: HttpRequest) -> JsonResponse:
    """Return every registered metric in display order."""

    return JsonResponse(
        {
            "metrics": [
                {
                    "key": definition.key,
                    "label": definition.label,
                    "description": definition.description,
                    "category": str(definition.category),
                }
                for definition in DEFAULT_REGISTRY.list()
            ]
        }
    )


@csrf_exempt
@require_POST
def render_session(request: HttpRequest) -> JsonResponse:
    """Render the dashboard for a posted session snapshot."""

    payload = _json_body(request)
    if payload is None:
        return _bad_request("Request body must be a JSON object.")
    dashboard = render_session_payload(payload, store=get_settings_store())
    return JsonResponse({"ok": True, **dashboard.as_json()})


@csrf_exempt
@require_http_methods(["GET", "POST", "DELETE"])
def pinned_metrics(request: HttpRequest) -> JsonResponse:
    """Read, toggle, replace or reset the pinned metric selection."""

    store = get_settings_store()
    default_pinned = get_engine_config().default_pinned

    if request.method == "DELETE":
        save_pinned_metrics(store, default_pinned)
    elif request.method == "POST":
        payload = _json_body(request)
        if payload is None:
            return _bad_request("Request body must be a JSON object.")
        error = _apply_pinned_action(store, payload, default_pinned=default_pinned)
        if error is not None:
            return _bad_request(error)

    return JsonResponse(_preferences_json(load_preferences(store, default_pinned=default_pinned)))


def _apply_pinned_action(store: SettingsStore, payload: dict[str, Any], *, default_pinned: PinnedMetrics) -> str | None:
    """Apply a `toggle` or `replace` action, returning an error message on bad input."""

    try:
        if "toggle" in payload:
            key = payload["toggle"]
            if not isinstance(key, str) or not key:
                return f"Unknown metric key: {key!r}."
            toggle_pinned_metric(store, key, default_pinned=default_pinned)
            return None

        if "replace" in payload:
            replacement = payload["replace"]
            if not isinstance(replacement, dict):
                return "`replace` must be an object with `slot` and `key`."
            slot = replacement.get("slot")
            key = replacement.get("key")
            if not isinstance(slot, int) or isinstance(slot, bool):
                return "`replace.slot` must be an integer."
            if not isinstance(key, str):
                return f"Unknown metric key: {key!r}."
            replace_pinned_metric(store, slot, key, default_pinned=default_pinned)
            return None
    except (UnknownMetricError, IndexError) as exc:
        return str(exc)

    return "Expected a `toggle` or `replace` action."


@csrf_exempt
@require_POST
def update_preferences(request: HttpRequest) -> JsonResponse:
    """Persist the markup / additional-expense toggles."""

    payload = _json_body(request)
    if payload is None:
        return _bad_request("Request body must be a JSON object.")

    toggles: dict[str, bool | None] = {}
    fields = (("applyMarkup", "apply_markup"), ("applyAdditionalExpenses", "apply_additional_expenses"))
    for field_name, argument in fields:
        value = payload.get(field_name)
        if value is not None and not isinstance(value, bool):
            return _bad_request(f"`{field_name}` must be a boolean.")
        toggles[argument] = value

    store = get_settings_store()
    set_adjustment_toggles(store, **toggles)
    default_pinned = get_engine_config().default_pinned
    return JsonResponse(_preferences_json(load_preferences(store, default_pinned=default_pinned)))
