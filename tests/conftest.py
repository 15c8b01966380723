"""Pytest fixtures shared across the overlay test suite."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from django.apps import apps

from overlay.settings_store import SettingsStore


@pytest.fixture
def settings_store(tmp_path, monkeypatch) -> SettingsStore:
    """Return a SettingsStore under `tmp_path` installed on the overlay app config."""

    store = SettingsStore.open(tmp_path / "settings.json")
    monkeypatch.setattr(apps.get_app_config("overlay"), "settings_store", store)
    return store


@pytest.fixture
def default_engine_config(settings) -> None:
    """Force built-in engine defaults regardless of the caller's environment."""

    settings.OVERLAY_ENGINE_CONFIG = None


@pytest.fixture
def stats_payload() -> dict[str, object]:
    """Return a camelCase stats payload with round reference numbers."""

    return {
        "lootValue": 100,
        "totalSpend": 80,
        "shots": 50,
        "hits": 40,
        "criticals": 4,
        "damageDealt": 2000,
        "duration": 120,
        "kills": 10,
        "skillGains": 2.0,
        "skills": {"totalSkillGains": 1.5, "totalSkillEvents": 6},
    }


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no Django request cycle or filesystem IO.
    - `integration`: tests touching Django views, commands, settings or files.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
