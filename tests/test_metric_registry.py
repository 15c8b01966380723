"""Unit tests for the metric registry and catalog."""

from __future__ import annotations

import pytest

from session_analysis.categories import MetricCategory
from session_analysis.colors import ColorToken
from session_analysis.derived import compute_derived_metrics
from session_analysis.metrics import DEFAULT_REGISTRY, MetricDefinition, MetricRegistry, snapshot_value
from session_analysis.snapshot import StatsSnapshot

pytestmark = pytest.mark.unit


def _definition(key: str, category: MetricCategory = MetricCategory.combat) -> MetricDefinition:
    return MetricDefinition(
        key=key,
        label=key.title(),
        description=f"{key} description",
        category=category,
        extractor=snapshot_value("kills"),
    )


def test_registry_rejects_duplicate_keys() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        MetricRegistry([_definition("kills"), _definition("kills")])


def test_registry_rejects_unknown_category() -> None:
    with pytest.raises(ValueError, match="invalid category"):
        MetricRegistry([_definition("kills", category="combat")])  # type: ignore[arg-type]


def test_registry_preserves_declaration_order() -> None:
    registry = MetricRegistry([_definition("b"), _definition("a", MetricCategory.time), _definition("c")])

    assert registry.keys() == ("b", "a", "c")
    assert [d.key for d in registry.by_category(MetricCategory.combat)] == ["b", "c"]
    assert registry.get("a") is not None
    assert registry.get("missing") is None
    assert "c" in registry
    assert len(registry) == 3


def test_default_catalog_starts_with_hero_metrics() -> None:
    """The default hero metrics lead the catalog in display order."""

    assert DEFAULT_REGISTRY.keys()[:3] == ("return_rate", "profit_loss", "total_kills")
    assert len(DEFAULT_REGISTRY) == 42


def test_default_catalog_has_descriptions_for_every_metric() -> None:
    for definition in DEFAULT_REGISTRY.list():
        assert definition.label
        assert definition.description
        assert isinstance(definition.category, MetricCategory)


def test_extractors_are_total_over_an_empty_snapshot() -> None:
    """Every extractor returns a value for an all-zero snapshot."""

    snapshot = StatsSnapshot()
    derived = compute_derived_metrics(snapshot, apply_markup=True, apply_additional_expenses=True)

    for definition in DEFAULT_REGISTRY.list():
        value = definition.extractor(snapshot, derived)
        assert value == 0, definition.key


def test_catalog_ratio_extractors(stats_payload) -> None:
    snapshot = StatsSnapshot.from_payload(stats_payload)
    derived = compute_derived_metrics(snapshot, apply_markup=False, apply_additional_expenses=False)

    def value(key: str):
        definition = DEFAULT_REGISTRY.get(key)
        assert definition is not None
        return definition.extractor(snapshot, derived)

    assert value("cost_per_kill") == pytest.approx(8.0)
    assert value("loot_per_kill") == pytest.approx(10.0)
    assert value("loot_per_ped") == pytest.approx(1.25)
    assert value("kills_per_ped") == pytest.approx(0.125)
    assert value("avg_damage_per_hit") == pytest.approx(50.0)
    assert value("shots_per_kill") == pytest.approx(5.0)
    assert value("skills_per_kill") == pytest.approx(0.15)
    assert value("avg_skill_value") == pytest.approx(0.25)
    assert value("skills_per_ped") == pytest.approx(0.025)


def _extract(key: str, snapshot: StatsSnapshot):
    derived = compute_derived_metrics(snapshot, apply_markup=False, apply_additional_expenses=False)
    definition = DEFAULT_REGISTRY.get(key)
    assert definition is not None
    return definition.extractor(snapshot, derived)


def test_kd_ratio_falls_back_to_kills_without_deaths() -> None:
    assert _extract("kd_ratio", StatsSnapshot(kills=12, deaths=3)) == pytest.approx(4.0)
    assert _extract("kd_ratio", StatsSnapshot(kills=12)) == pytest.approx(12.0)


def test_kd_ratio_classifier_thresholds() -> None:
    definition = DEFAULT_REGISTRY.get("kd_ratio")
    assert definition is not None and definition.classifier is not None

    assert definition.classifier(10.0) is ColorToken.positive
    assert definition.classifier(1.0) is ColorToken.warning
    assert definition.classifier(0.5) is ColorToken.negative


def test_defensive_and_economy_counters_are_exposed() -> None:
    snapshot = StatsSnapshot(
        criticals=4,
        damage_taken=321.0,
        deflects=7,
        dodges=2,
        evades=5,
        misses=9,
        armor=1.25,
        loot_count=14,
        markup_enabled=True,
        markup_value=3.5,
    )

    assert _extract("total_criticals", snapshot) == 4
    assert _extract("damage_taken", snapshot) == 321.0
    assert _extract("deflects", snapshot) == 7
    assert _extract("dodges", snapshot) == 2
    assert _extract("evades", snapshot) == 5
    assert _extract("misses", snapshot) == 9
    assert _extract("armor_decay", snapshot) == 1.25
    assert _extract("loot_events", snapshot) == 14
    assert _extract("markup_value", snapshot) == 3.5


def test_markup_value_is_zero_when_tracking_is_off() -> None:
    assert _extract("markup_value", StatsSnapshot(markup_value=3.5)) == 0.0


def test_profit_per_hour_is_sign_classified() -> None:
    losing = StatsSnapshot(loot_value=10.0, total_spend=40.0, duration=1800.0)
    definition = DEFAULT_REGISTRY.get("profit_per_hour")
    assert definition is not None and definition.classifier is not None

    value = _extract("profit_per_hour", losing)

    assert value == pytest.approx(-60.0)
    assert definition.classifier(value) is ColorToken.negative
    assert definition.category is MetricCategory.hourly
