"""Unit tests for building analysis inputs from producer payloads."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from session_analysis.snapshot import LoadoutInput, SessionInput, StatsSnapshot, WeaponInput

pytestmark = pytest.mark.unit


def test_snapshot_reads_camel_case_counters(stats_payload) -> None:
    """Known camelCase keys map onto snapshot fields."""

    snapshot = StatsSnapshot.from_payload(stats_payload)

    assert snapshot.loot_value == 100.0
    assert snapshot.total_spend == 80.0
    assert snapshot.shots == 50
    assert snapshot.hits == 40
    assert snapshot.damage_dealt == 2000.0
    assert snapshot.kills == 10
    assert snapshot.skills.total_skill_gains == 1.5
    assert snapshot.skills.total_skill_events == 6


def test_snapshot_defaults_missing_and_malformed_fields() -> None:
    """Missing, negative, boolean and non-numeric values become 0."""

    snapshot = StatsSnapshot.from_payload(
        {"kills": -3, "shots": "12", "hits": True, "lootValue": float("nan"), "duration": None}
    )

    assert snapshot == StatsSnapshot()


def test_snapshot_without_skills_has_empty_aggregate() -> None:
    """A payload lacking `skills` yields an empty aggregate."""

    snapshot = StatsSnapshot.from_payload({"kills": 2})

    assert snapshot.skills.total_skill_gains == 0.0
    assert snapshot.skills.total_skill_events == 0
    assert dict(snapshot.skills.categories) == {}


def test_snapshot_from_none_is_empty() -> None:
    assert StatsSnapshot.from_payload(None) == StatsSnapshot()


def test_skill_categories_accept_records_and_bare_numbers() -> None:
    """Category entries may be gain/event records or plain gain totals."""

    snapshot = StatsSnapshot.from_payload(
        {
            "skills": {
                "categories": {
                    "Combat": {"gains": 0.8, "events": 3},
                    "Defense": 0.2,
                    "Broken": "n/a",
                }
            }
        }
    )
    categories = snapshot.skills.categories

    assert categories["Combat"].gains == 0.8
    assert categories["Combat"].events == 3
    assert categories["Defense"].gains == 0.2
    assert categories["Broken"].gains == 0.0
    with pytest.raises(TypeError):
        categories["New"] = categories["Combat"]  # type: ignore[index]


def test_session_without_end_is_live() -> None:
    session = SessionInput.from_payload({"id": "s-1", "startedAt": "2026-03-01T10:00:00+00:00"})

    assert session.is_live is True
    assert session.started_at == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_ended_session_is_frozen() -> None:
    session = SessionInput.from_payload(
        {"id": "s-2", "startedAt": "2026-03-01T10:00:00+00:00", "endedAt": "2026-03-01T11:30:00+00:00"}
    )

    assert session.is_live is False


def test_session_event_count_falls_back_to_events_list() -> None:
    """`eventCount` wins; otherwise the events list length is used."""

    counted = SessionInput.from_payload({"id": "a", "eventCount": 12, "events": [1, 2]})
    listed = SessionInput.from_payload({"id": "b", "events": [{}, {}, {}]})

    assert counted.event_count == 12
    assert listed.event_count == 3


def test_session_ignores_unparseable_timestamps() -> None:
    session = SessionInput.from_payload({"id": 7, "endedAt": "yesterday"})

    assert session.id == "7"
    assert session.ended_at is None


@pytest.mark.parametrize(
    ("rate", "expected"),
    [(45.0, 45.0), (0.0, None), (-5.0, None), (float("inf"), None), (None, None)],
)
def test_loadout_exposes_only_positive_finite_rates(rate: float | None, expected: float | None) -> None:
    loadout = LoadoutInput(weapon=WeaponInput(uses_per_minute=rate))

    assert loadout.weapon_uses_per_minute() == expected


def test_loadout_from_payload() -> None:
    loadout = LoadoutInput.from_payload({"name": "Tier 1", "weapon": {"name": "Opalo", "usesPerMinute": 56}})

    assert loadout is not None
    assert loadout.name == "Tier 1"
    assert loadout.weapon == WeaponInput(name="Opalo", uses_per_minute=56.0)
    assert LoadoutInput.from_payload("nope") is None
    assert LoadoutInput().weapon_uses_per_minute() is None
