"""Engine configuration loaded from an optional YAML file.

Example file:

    adjustments:
      markup_multiplier: 1.05
      additional_expense_rate: 0.02
    default_pinned_metrics: [return_rate, profit_loss, total_kills]

A missing path means built-in defaults. An unreadable or invalid file is a
configuration error and fails fast.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from session_analysis.derived import AdjustmentConfig
from session_analysis.metrics import DEFAULT_REGISTRY, MetricRegistry
from session_analysis.pinned import PinnedMetrics


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Resolved engine configuration.

    Attributes:
        adjustments: Markup and additional-expense constants.
        default_pinned: Selection used when no pinned metrics are stored.
    """

    adjustments: AdjustmentConfig = field(default_factory=AdjustmentConfig)
    default_pinned: PinnedMetrics = field(default_factory=PinnedMetrics)


def load_engine_config(
    path: Path | str | None,
    *,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Args:
        path: YAML file location, or None for defaults.
        registry: Registry used to validate default pinned metric keys.

    Returns:
        EngineConfig with file values layered over defaults.

    Raises:
        ImproperlyConfigured: When the file cannot be read, is not valid YAML,
            or holds invalid values.
    """

    if path is None or not str(path).strip():
        return EngineConfig()

    config_path = Path(path)
    try:
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ImproperlyConfigured(f"Could not read engine config {config_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ImproperlyConfigured(f"Engine config {config_path} must be a mapping.")

    adjustments_payload = payload.get("adjustments") or {}
    if not isinstance(adjustments_payload, dict):
        raise ImproperlyConfigured("Engine config `adjustments` must be a mapping.")
    defaults = AdjustmentConfig()
    try:
        adjustments = AdjustmentConfig(
            markup_multiplier=float(adjustments_payload.get("markup_multiplier", defaults.markup_multiplier)),
            additional_expense_rate=float(
                adjustments_payload.get("additional_expense_rate", defaults.additional_expense_rate)
            ),
        )
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(f"Invalid engine config adjustments: {exc}") from exc

    default_pinned = PinnedMetrics()
    raw_pinned = payload.get("default_pinned_metrics")
    if raw_pinned is not None:
        if not isinstance(raw_pinned, list) or not all(isinstance(key, str) for key in raw_pinned):
            raise ImproperlyConfigured("Engine config `default_pinned_metrics` must be a list of metric keys.")
        unknown = [key for key in raw_pinned if key and key not in registry]
        if unknown:
            raise ImproperlyConfigured(f"Unknown metric keys in `default_pinned_metrics`: {unknown!r}.")
        default_pinned = PinnedMetrics.from_names(raw_pinned)

    return EngineConfig(adjustments=adjustments, default_pinned=default_pinned)


def get_engine_config() -> EngineConfig:
    """Return the engine configuration for the current Django settings."""

    return load_engine_config(getattr(settings, "OVERLAY_ENGINE_CONFIG", None))
