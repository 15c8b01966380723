"""Dashboard preferences persisted through the settings store.

Every mutation reads the stored value, applies the change and writes it back
while holding the store lock, so concurrent requests never lose updates.
"""

from __future__ import annotations

from typing import Final

from session_analysis.dto import DashboardPreferences
from session_analysis.metrics import DEFAULT_REGISTRY, MetricRegistry
from session_analysis.pinned import EMPTY_SLOT, PinnedMetrics

from .settings_store import SettingsStore

PINNED_METRICS_KEY: Final = "pinned_metrics"
APPLY_MARKUP_KEY: Final = "apply_markup"
APPLY_EXPENSES_KEY: Final = "apply_additional_expenses"


class UnknownMetricError(ValueError):
    """Raised when a metric key that is not in the catalog would be pinned."""


def load_preferences(store: SettingsStore, *, default_pinned: PinnedMetrics | None = None) -> DashboardPreferences:
    """Read dashboard preferences, falling back to defaults for missing or malformed values."""

    return DashboardPreferences(
        pinned=load_pinned_metrics(store, default_pinned=default_pinned),
        apply_markup=store.get(APPLY_MARKUP_KEY) is True,
        apply_additional_expenses=store.get(APPLY_EXPENSES_KEY) is True,
    )


def load_pinned_metrics(store: SettingsStore, *, default_pinned: PinnedMetrics | None = None) -> PinnedMetrics:
    """Read the stored pinned selection, or `default_pinned` when absent or malformed."""

    return PinnedMetrics.from_value(store.get(PINNED_METRICS_KEY), default=default_pinned)


def save_pinned_metrics(store: SettingsStore, pinned: PinnedMetrics) -> PinnedMetrics:
    """Persist a pinned selection and return it."""

    store.save({PINNED_METRICS_KEY: pinned.to_value()})
    return pinned


def toggle_pinned_metric(
    store: SettingsStore,
    key: str,
    *,
    default_pinned: PinnedMetrics | None = None,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> PinnedMetrics:
    """Toggle a metric in the stored pinned selection and persist the result.

    A pinned key is always removable, including stale keys the catalog no
    longer knows. Adding requires a catalog key.

    Raises:
        UnknownMetricError: When `key` is not pinned and not in `registry`.
    """

    with store.locked():
        current = load_pinned_metrics(store, default_pinned=default_pinned)
        if key not in current and key not in registry:
            raise UnknownMetricError(f"Unknown metric key: {key!r}.")
        return save_pinned_metrics(store, current.toggle(key))


def replace_pinned_metric(
    store: SettingsStore,
    slot: int,
    key: str,
    *,
    default_pinned: PinnedMetrics | None = None,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> PinnedMetrics:
    """Put `key` into `slot` of the stored selection and persist the result.

    An empty `key` clears the slot.

    Raises:
        UnknownMetricError: When a non-empty `key` is not in `registry`.
        IndexError: When `slot` is outside the selection.
    """

    with store.locked():
        if key != EMPTY_SLOT and key not in registry:
            raise UnknownMetricError(f"Unknown metric key: {key!r}.")
        current = load_pinned_metrics(store, default_pinned=default_pinned)
        return save_pinned_metrics(store, current.replace(slot, key))


def set_adjustment_toggles(
    store: SettingsStore,
    *,
    apply_markup: bool | None = None,
    apply_additional_expenses: bool | None = None,
) -> None:
    """Persist the markup / additional-expense toggles that are not None."""

    updates: dict[str, bool] = {}
    if apply_markup is not None:
        updates[APPLY_MARKUP_KEY] = apply_markup
    if apply_additional_expenses is not None:
        updates[APPLY_EXPENSES_KEY] = apply_additional_expenses
    if updates:
        store.save(updates)
