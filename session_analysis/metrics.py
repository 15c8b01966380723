"""Metric registry for the session dashboard.

This module centralizes the catalog of displayable metrics: each entry pairs a
stable key and label with a pure extractor, an optional formatter and an
optional color classifier. Declaration order is display order; the stat
picker enumerates the registry in that order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final

from .categories import MetricCategory
from .colors import Classifier, ColorToken, fixed_classifier, sign_classifier, threshold_classifier
from .derived import DerivedMetrics
from .formatting import Formatter, decimal_formatter, format_count, format_duration, format_ped, percent_formatter
from .rates import safe_ratio
from .snapshot import StatsSnapshot

MetricValue = float | int | str
Extractor = Callable[[StatsSnapshot, DerivedMetrics], MetricValue]


@dataclass(frozen=True, slots=True)
class MetricDefinition:
    """Definition for a displayable session metric.

    Args:
        key: Stable metric key used by pinned selections and the API.
        label: Human-friendly label.
        description: Tooltip text for the configuration surface.
        category: Semantic category used for grouping.
        extractor: Pure function of (snapshot, derived scalars).
        formatter: Optional number-to-string formatter.
        classifier: Optional number-to-ColorToken classifier.
    """

    key: str
    label: str
    description: str
    category: MetricCategory
    extractor: Extractor
    formatter: Formatter | None = None
    classifier: Classifier | None = None


class MetricRegistry:
    """Lookup and enumeration helpers for metric definitions."""

    def __init__(self, definitions: Iterable[MetricDefinition]) -> None:
        """Initialize a registry from a collection of definitions."""

        self._definitions: dict[str, MetricDefinition] = {}
        for definition in definitions:
            if definition.key in self._definitions:
                raise ValueError(f"Duplicate MetricDefinition key: {definition.key!r}")
            if not isinstance(definition.category, MetricCategory):
                raise ValueError(
                    f"MetricDefinition[{definition.key!r}] has invalid category={definition.category!r}; "
                    "expected MetricCategory."
                )
            self._definitions[definition.key] = definition

    def __contains__(self, key: object) -> bool:
        return key in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def get(self, key: str) -> MetricDefinition | None:
        """Return the definition for a metric key, or None when missing."""

        return self._definitions.get(key)

    def list(self) -> tuple[MetricDefinition, ...]:
        """Return all definitions in declaration (display) order."""

        return tuple(self._definitions.values())

    def keys(self) -> tuple[str, ...]:
        """Return all metric keys in display order."""

        return tuple(self._definitions)

    def by_category(self, category: MetricCategory) -> tuple[MetricDefinition, ...]:
        """Return definitions of one category, in display order."""

        return tuple(d for d in self._definitions.values() if d.category is category)


def derived_value(name: str) -> Extractor:
    """Return an extractor reading a scalar from DerivedMetrics."""

    def _extract(_snapshot: StatsSnapshot, derived: DerivedMetrics) -> MetricValue:
        return getattr(derived, name)

    return _extract


def snapshot_value(name: str) -> Extractor:
    """Return an extractor reading a raw counter from the snapshot."""

    def _extract(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
        return getattr(snapshot, name)

    return _extract


def _cost_per_kill(snapshot: StatsSnapshot, derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(derived.adjusted_spend, snapshot.kills)


def _loot_per_kill(snapshot: StatsSnapshot, derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(derived.adjusted_loot, snapshot.kills)


def _loot_per_ped(_snapshot: StatsSnapshot, derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(derived.adjusted_loot, derived.adjusted_spend)


def _kills_per_ped(snapshot: StatsSnapshot, derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(snapshot.kills, derived.adjusted_spend)


def _avg_damage_per_hit(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(snapshot.damage_dealt, snapshot.hits)


def _shots_per_kill(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(snapshot.shots, snapshot.kills)


def _kd_ratio(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    if snapshot.deaths > 0:
        return snapshot.kills / snapshot.deaths
    return float(snapshot.kills)


def _markup_value(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    return snapshot.markup_value if snapshot.markup_enabled else 0.0


def _total_skill_gains(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    return snapshot.skills.total_skill_gains


def _skill_events(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    return snapshot.skills.total_skill_events


def _skills_per_kill(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(snapshot.skills.total_skill_gains, snapshot.kills)


def _avg_skill_value(snapshot: StatsSnapshot, _derived: DerivedMetrics) -> MetricValue:
    return safe_ratio(snapshot.skills.total_skill_gains, snapshot.skills.total_skill_events)


_ONE_DP: Final = decimal_formatter(1)
_TWO_DP: Final = decimal_formatter(2)
_FOUR_DP: Final = decimal_formatter(4)
_PERCENT: Final = percent_formatter(1)


DEFAULT_REGISTRY: Final[MetricRegistry] = MetricRegistry(
    definitions=(
        MetricDefinition(
            key="return_rate",
            label="Return Rate",
            description="Percentage of total loot vs total spend (higher is better)",
            category=MetricCategory.economy,
            extractor=derived_value("return_rate"),
            formatter=_PERCENT,
            classifier=threshold_classifier(good=90.0, warn=80.0),
        ),
        MetricDefinition(
            key="profit_loss",
            label="Profit/Loss",
            description="Net profit or loss (Total Loot - Total Spend)",
            category=MetricCategory.economy,
            extractor=derived_value("profit_loss"),
            formatter=format_ped,
            classifier=sign_classifier,
        ),
        MetricDefinition(
            key="total_kills",
            label="Total Kills",
            description="Total number of mobs killed",
            category=MetricCategory.combat,
            extractor=snapshot_value("kills"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="skills_per_ped",
            label="Skills/PED",
            description="Skill gains per PED spent (efficiency measure)",
            category=MetricCategory.skills,
            extractor=derived_value("skills_per_ped"),
            formatter=_FOUR_DP,
        ),
        MetricDefinition(
            key="hit_rate",
            label="Hit Rate",
            description="Percentage of shots that hit the target",
            category=MetricCategory.combat,
            extractor=derived_value("hit_rate"),
            formatter=_PERCENT,
            classifier=threshold_classifier(good=80.0, warn=60.0),
        ),
        MetricDefinition(
            key="crit_rate",
            label="Crit Rate",
            description="Percentage of hits that were critical hits",
            category=MetricCategory.combat,
            extractor=derived_value("crit_rate"),
            formatter=_PERCENT,
        ),
        MetricDefinition(
            key="total_events",
            label="Total Events",
            description="Total number of events recorded in session",
            category=MetricCategory.time,
            extractor=derived_value("event_count"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="total_loot",
            label="Total Loot",
            description="Total PED value of all loot received",
            category=MetricCategory.economy,
            extractor=derived_value("adjusted_loot"),
            formatter=format_ped,
            classifier=fixed_classifier(ColorToken.positive),
        ),
        MetricDefinition(
            key="total_spend",
            label="Total Spend",
            description="Total PED spent on ammunition and decay",
            category=MetricCategory.economy,
            extractor=derived_value("adjusted_spend"),
            formatter=format_ped,
            classifier=fixed_classifier(ColorToken.negative),
        ),
        MetricDefinition(
            key="cost_per_kill",
            label="Cost/Kill",
            description="Average cost per mob killed",
            category=MetricCategory.efficiency,
            extractor=_cost_per_kill,
            formatter=format_ped,
        ),
        MetricDefinition(
            key="loot_per_kill",
            label="Loot/Kill",
            description="Average loot received per mob killed",
            category=MetricCategory.efficiency,
            extractor=_loot_per_kill,
            formatter=format_ped,
        ),
        MetricDefinition(
            key="loot_per_ped",
            label="Loot/PED",
            description="Loot value returned per PED spent",
            category=MetricCategory.economy,
            extractor=_loot_per_ped,
            formatter=_TWO_DP,
        ),
        MetricDefinition(
            key="armor_decay",
            label="Armor Decay",
            description="PED lost to armor decay",
            category=MetricCategory.economy,
            extractor=snapshot_value("armor"),
            formatter=format_ped,
        ),
        MetricDefinition(
            key="loot_events",
            label="Loot Events",
            description="Number of loot items received",
            category=MetricCategory.economy,
            extractor=snapshot_value("loot_count"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="markup_value",
            label="Markup",
            description="Markup value over TT of the loot (0 when markup tracking is off)",
            category=MetricCategory.economy,
            extractor=_markup_value,
            formatter=format_ped,
            classifier=fixed_classifier(ColorToken.positive),
        ),
        MetricDefinition(
            key="dpp",
            label="DPP",
            description="Damage Per PEC - efficiency of damage vs cost",
            category=MetricCategory.efficiency,
            extractor=derived_value("dpp"),
            formatter=_TWO_DP,
        ),
        MetricDefinition(
            key="dps",
            label="DPS",
            description="Damage Per Second - your damage output rate",
            category=MetricCategory.efficiency,
            extractor=derived_value("dps"),
            formatter=_ONE_DP,
        ),
        MetricDefinition(
            key="kills_per_ped",
            label="Kills/PED",
            description="Number of kills per PED spent",
            category=MetricCategory.efficiency,
            extractor=_kills_per_ped,
            formatter=_TWO_DP,
        ),
        MetricDefinition(
            key="kills_per_hour",
            label="Kills/Hour",
            description="Projected kills per hour based on current rate",
            category=MetricCategory.hourly,
            extractor=derived_value("kills_per_hour"),
            formatter=_ONE_DP,
        ),
        MetricDefinition(
            key="avg_damage_per_hit",
            label="Avg Dmg/Hit",
            description="Average damage dealt per successful hit",
            category=MetricCategory.efficiency,
            extractor=_avg_damage_per_hit,
            formatter=_ONE_DP,
        ),
        MetricDefinition(
            key="shots_per_kill",
            label="Shots/Kill",
            description="Average number of shots needed per kill",
            category=MetricCategory.efficiency,
            extractor=_shots_per_kill,
            formatter=_ONE_DP,
        ),
        MetricDefinition(
            key="total_skill_gains",
            label="Total Gains",
            description="Total skill value gained in the session",
            category=MetricCategory.skills,
            extractor=_total_skill_gains,
            formatter=_FOUR_DP,
        ),
        MetricDefinition(
            key="skill_events",
            label="Skill Events",
            description="Number of times skills increased",
            category=MetricCategory.skills,
            extractor=_skill_events,
            formatter=format_count,
        ),
        MetricDefinition(
            key="skills_per_hour",
            label="Skills/Hour",
            description="Projected skill gains per hour",
            category=MetricCategory.hourly,
            extractor=derived_value("skills_per_hour"),
            formatter=_TWO_DP,
        ),
        MetricDefinition(
            key="skills_per_kill",
            label="Skills/Kill",
            description="Average skill gains per kill",
            category=MetricCategory.skills,
            extractor=_skills_per_kill,
            formatter=_FOUR_DP,
        ),
        MetricDefinition(
            key="avg_skill_value",
            label="Avg Skill Value",
            description="Average skill value per skill event",
            category=MetricCategory.skills,
            extractor=_avg_skill_value,
            formatter=_FOUR_DP,
        ),
        MetricDefinition(
            key="total_damage",
            label="Total Damage",
            description="Total damage dealt in the session",
            category=MetricCategory.combat,
            extractor=snapshot_value("damage_dealt"),
            formatter=decimal_formatter(0),
        ),
        MetricDefinition(
            key="total_shots",
            label="Total Shots",
            description="Total number of shots fired",
            category=MetricCategory.combat,
            extractor=snapshot_value("shots"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="total_hits",
            label="Total Hits",
            description="Total number of successful hits",
            category=MetricCategory.combat,
            extractor=snapshot_value("hits"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="deaths",
            label="Deaths",
            description="Number of times you died",
            category=MetricCategory.combat,
            extractor=snapshot_value("deaths"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="kd_ratio",
            label="K/D Ratio",
            description="Kills per death (total kills while deathless)",
            category=MetricCategory.combat,
            extractor=_kd_ratio,
            formatter=_ONE_DP,
            classifier=threshold_classifier(good=10.0, warn=1.0),
        ),
        MetricDefinition(
            key="total_criticals",
            label="Crits",
            description="Number of critical hits landed",
            category=MetricCategory.combat,
            extractor=snapshot_value("criticals"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="damage_taken",
            label="Dmg Taken",
            description="Total damage received",
            category=MetricCategory.combat,
            extractor=snapshot_value("damage_taken"),
            formatter=decimal_formatter(0),
            classifier=fixed_classifier(ColorToken.negative),
        ),
        MetricDefinition(
            key="deflects",
            label="Deflects",
            description="Attacks fully deflected by armor",
            category=MetricCategory.combat,
            extractor=snapshot_value("deflects"),
            formatter=format_count,
            classifier=fixed_classifier(ColorToken.positive),
        ),
        MetricDefinition(
            key="dodges",
            label="Dodges",
            description="Attacks you dodged",
            category=MetricCategory.combat,
            extractor=snapshot_value("dodges"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="evades",
            label="Evades",
            description="Attacks you evaded",
            category=MetricCategory.combat,
            extractor=snapshot_value("evades"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="misses",
            label="Misses",
            description="Attacks that missed you",
            category=MetricCategory.combat,
            extractor=snapshot_value("misses"),
            formatter=format_count,
        ),
        MetricDefinition(
            key="loot_per_hour",
            label="Loot/Hour",
            description="Projected loot per hour based on current rate",
            category=MetricCategory.hourly,
            extractor=derived_value("loot_per_hour"),
            formatter=format_ped,
        ),
        MetricDefinition(
            key="spend_per_hour",
            label="Spend/Hour",
            description="Projected spend per hour based on current rate",
            category=MetricCategory.hourly,
            extractor=derived_value("spend_per_hour"),
            formatter=format_ped,
        ),
        MetricDefinition(
            key="profit_per_hour",
            label="Profit/Hour",
            description="Projected net profit per hour based on current rate",
            category=MetricCategory.hourly,
            extractor=derived_value("profit_per_hour"),
            formatter=format_ped,
            classifier=sign_classifier,
        ),
        MetricDefinition(
            key="damage_per_hour",
            label="Dmg/Hour",
            description="Projected damage per hour based on current rate",
            category=MetricCategory.hourly,
            extractor=derived_value("damage_per_hour"),
            formatter=decimal_formatter(0),
        ),
        MetricDefinition(
            key="combat_time",
            label="Combat Time",
            description="Total time spent in combat",
            category=MetricCategory.time,
            extractor=derived_value("combat_time"),
            formatter=format_duration,
        ),
    )
)
