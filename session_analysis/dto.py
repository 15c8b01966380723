"""DTO types returned by session analysis.

DTOs are plain data containers used to transport results to the UI layer.
They intentionally avoid any Django dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .categories import MetricCategory
from .derived import DerivedMetrics
from .pinned import PinnedMetrics
from .presentation import RenderedMetric


@dataclass(frozen=True, slots=True)
class DashboardPreferences:
    """User choices that shape a dashboard render.

    Attributes:
        pinned: The 3-slot hero metric selection.
        apply_markup: Whether loot is adjusted by the markup multiplier.
        apply_additional_expenses: Whether a share of spend is added as expenses.
    """

    pinned: PinnedMetrics = field(default_factory=PinnedMetrics)
    apply_markup: bool = False
    apply_additional_expenses: bool = False


@dataclass(frozen=True)
class DashboardSection:
    """Rendered metrics of one category.

    Attributes:
        category: Category shared by the metrics.
        metrics: Rendered metrics in registry order.
    """

    category: MetricCategory
    metrics: tuple[RenderedMetric, ...] = ()


@dataclass(frozen=True)
class SessionDashboard:
    """Container for a full dashboard render.

    Attributes:
        session_id: Identifier of the analyzed session.
        is_live: False once the session has ended and its snapshot is frozen.
        derived: Derived scalars for the snapshot.
        pinned: Rendered hero metrics (empty slots and unknown keys omitted).
        sections: Every catalog metric grouped by category.
    """

    session_id: str
    is_live: bool
    derived: DerivedMetrics
    pinned: tuple[RenderedMetric, ...] = ()
    sections: tuple[DashboardSection, ...] = ()

    def as_json(self) -> dict[str, object]:
        """Return a JSON-ready mapping."""

        return {
            "sessionId": self.session_id,
            "isLive": self.is_live,
            "derived": self.derived.as_dict(),
            "pinned": [metric.as_json() for metric in self.pinned],
            "sections": [
                {
                    "category": str(section.category),
                    "metrics": [metric.as_json() for metric in section.metrics],
                }
                for section in self.sections
            ],
        }
