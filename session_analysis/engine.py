"""Orchestration entry point for session analysis.

The engine is a pure, non-Django module that accepts in-memory inputs and
returns DTOs. It must not import Django or perform any I/O. Callers are
responsible for supplying the frozen snapshot once a session has ended.
"""

from __future__ import annotations

from .categories import MetricCategory
from .derived import AdjustmentConfig, compute_derived_metrics
from .dto import DashboardPreferences, DashboardSection, SessionDashboard
from .metrics import DEFAULT_REGISTRY, MetricRegistry
from .presentation import render_definition, render_metrics
from .snapshot import LoadoutInput, SessionInput


def analyze_session(
    session: SessionInput,
    *,
    loadout: LoadoutInput | None = None,
    preferences: DashboardPreferences | None = None,
    config: AdjustmentConfig | None = None,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> SessionDashboard:
    """Analyze a session snapshot and render its dashboard.

    Args:
        session: Session handle carrying the current snapshot.
        loadout: Optional active loadout; its weapon firing rate selects the
            rate-based DPS/DPP branch.
        preferences: Pinned selection and adjustment toggles. Defaults apply
            when omitted.
        config: Optional AdjustmentConfig overriding markup/expense constants.
        registry: Metric catalog to render from.

    Returns:
        SessionDashboard with derived scalars, rendered pinned metrics and
        every catalog metric grouped by category.
    """

    preferences = preferences or DashboardPreferences()
    snapshot = session.snapshot

    derived = compute_derived_metrics(
        snapshot,
        apply_markup=preferences.apply_markup,
        apply_additional_expenses=preferences.apply_additional_expenses,
        weapon_uses_per_minute=loadout.weapon_uses_per_minute() if loadout is not None else None,
        event_count=session.event_count,
        config=config,
    )

    sections: list[DashboardSection] = []
    for category in MetricCategory:
        definitions = registry.by_category(category)
        if not definitions:
            continue
        sections.append(
            DashboardSection(
                category=category,
                metrics=tuple(render_definition(d, snapshot, derived) for d in definitions),
            )
        )

    return SessionDashboard(
        session_id=session.id,
        is_live=session.is_live,
        derived=derived,
        pinned=render_metrics(preferences.pinned.slots, snapshot, derived, registry=registry),
        sections=tuple(sections),
    )
