"""Resolve metric keys into display-ready values."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .colors import TOKEN_HEX, ColorToken
from .derived import DerivedMetrics
from .metrics import DEFAULT_REGISTRY, MetricDefinition, MetricRegistry
from .snapshot import StatsSnapshot


@dataclass(frozen=True, slots=True)
class RenderedMetric:
    """A metric ready for display.

    Attributes:
        key: Metric key.
        label: Human-friendly label.
        value: Formatted value string.
        color: Semantic color token.
        description: Tooltip text.
    """

    key: str
    label: str
    value: str
    color: ColorToken
    description: str

    def as_json(self) -> dict[str, str]:
        """Return a JSON-ready mapping."""

        return {
            "key": self.key,
            "label": self.label,
            "value": self.value,
            "color": str(self.color),
            "hex": TOKEN_HEX[self.color],
            "description": self.description,
        }


def render_definition(
    definition: MetricDefinition,
    snapshot: StatsSnapshot,
    derived: DerivedMetrics,
) -> RenderedMetric:
    """Render a single definition.

    Non-numeric extractor results are passed to the formatter and classifier
    as 0; without a formatter the raw value is stringified, and without a
    classifier the color is neutral.
    """

    raw = definition.extractor(snapshot, derived)
    number = float(raw) if isinstance(raw, (int, float)) and not isinstance(raw, bool) else 0.0
    value = definition.formatter(number) if definition.formatter is not None else str(raw)
    color = definition.classifier(number) if definition.classifier is not None else ColorToken.neutral
    return RenderedMetric(
        key=definition.key,
        label=definition.label,
        value=value,
        color=color,
        description=definition.description,
    )


def render_metric(
    key: str,
    snapshot: StatsSnapshot,
    derived: DerivedMetrics,
    *,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> RenderedMetric | None:
    """Render a metric by key, returning None for unknown keys."""

    definition = registry.get(key)
    if definition is None:
        return None
    return render_definition(definition, snapshot, derived)


def render_metrics(
    keys: Iterable[str],
    snapshot: StatsSnapshot,
    derived: DerivedMetrics,
    *,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> tuple[RenderedMetric, ...]:
    """Render several metrics, omitting empty slots and unknown keys."""

    rendered: list[RenderedMetric] = []
    for key in keys:
        if not key:
            continue
        metric = render_metric(key, snapshot, derived, registry=registry)
        if metric is not None:
            rendered.append(metric)
    return tuple(rendered)
