"""Input DTOs for session analysis: stats snapshot, session and loadout.

The event-ingestion side of the overlay produces a camelCase JSON payload of
accumulated counters. This module turns that payload into immutable, fully
defaulted DTOs exactly once, so every extractor downstream can read fields
without checking for absence.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Final


@dataclass(frozen=True, slots=True)
class SkillCategoryStats:
    """Per-category skill gain record.

    Args:
        gains: Total skill value gained in the category.
        events: Number of skill gain events in the category.
    """

    gains: float = 0.0
    events: int = 0


@dataclass(frozen=True, slots=True)
class SkillAggregate:
    """Nested skill totals carried by a stats snapshot.

    Args:
        total: Overall skill total reported by the producer.
        total_skill_gains: Sum of skill values gained in the session.
        total_skill_events: Number of skill gain events in the session.
        categories: Read-only mapping from category name to its record.
    """

    total: float = 0.0
    total_skill_gains: float = 0.0
    total_skill_events: int = 0
    categories: Mapping[str, SkillCategoryStats] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_payload(cls, payload: object) -> SkillAggregate:
        """Build an aggregate from a payload, returning an empty one when malformed."""

        if not isinstance(payload, Mapping):
            return cls()

        categories: dict[str, SkillCategoryStats] = {}
        raw_categories = payload.get("categories")
        if isinstance(raw_categories, Mapping):
            for name, raw in raw_categories.items():
                if not isinstance(name, str):
                    continue
                if isinstance(raw, Mapping):
                    categories[name] = SkillCategoryStats(
                        gains=_coerce_amount(raw.get("gains", raw.get("totalGains"))),
                        events=_coerce_count(raw.get("events", raw.get("totalEvents"))),
                    )
                else:
                    categories[name] = SkillCategoryStats(gains=_coerce_amount(raw))

        return cls(
            total=_coerce_amount(payload.get("total")),
            total_skill_gains=_coerce_amount(payload.get("totalSkillGains")),
            total_skill_events=_coerce_count(payload.get("totalSkillEvents")),
            categories=MappingProxyType(categories),
        )


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """Immutable point-in-time aggregate of a session's raw counters.

    All counters default to zero so a partial payload still produces a
    complete snapshot. Producers are expected to keep `hits <= shots` and
    `criticals <= hits`; the engine does not enforce it.
    """

    kills: int = 0
    shots: int = 0
    hits: int = 0
    criticals: int = 0
    deaths: int = 0
    misses: int = 0
    dodges: int = 0
    evades: int = 0
    deflects: int = 0
    damage_dealt: float = 0.0
    damage_taken: float = 0.0
    loot_value: float = 0.0
    loot_count: int = 0
    total_spend: float = 0.0
    duration: float = 0.0
    skill_gains: float = 0.0
    armor: float = 0.0
    markup_enabled: bool = False
    markup_value: float = 0.0
    skills: SkillAggregate = field(default_factory=SkillAggregate)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object] | None) -> StatsSnapshot:
        """Build a snapshot from the producer's camelCase payload.

        Args:
            payload: Mapping of counters keyed by their camelCase names, or None.

        Returns:
            A StatsSnapshot where every missing, negative or non-numeric
            counter is 0 and a missing skill aggregate is empty.
        """

        if not isinstance(payload, Mapping):
            return cls()

        values: dict[str, object] = {}
        for attr, key in _COUNT_FIELDS.items():
            values[attr] = _coerce_count(payload.get(key))
        for attr, key in _AMOUNT_FIELDS.items():
            values[attr] = _coerce_amount(payload.get(key))
        values["markup_enabled"] = payload.get("markupEnabled") is True
        values["skills"] = SkillAggregate.from_payload(payload.get("skills"))
        return cls(**values)


_COUNT_FIELDS: Final[dict[str, str]] = {
    "kills": "kills",
    "shots": "shots",
    "hits": "hits",
    "criticals": "criticals",
    "deaths": "deaths",
    "misses": "misses",
    "dodges": "dodges",
    "evades": "evades",
    "deflects": "deflects",
    "loot_count": "lootCount",
}

_AMOUNT_FIELDS: Final[dict[str, str]] = {
    "damage_dealt": "damageDealt",
    "damage_taken": "damageTaken",
    "loot_value": "lootValue",
    "total_spend": "totalSpend",
    "duration": "duration",
    "skill_gains": "skillGains",
    "armor": "armor",
    "markup_value": "markupValue",
}


@dataclass(frozen=True, slots=True)
class WeaponInput:
    """Weapon fields relevant to the DPS/DPP formula branch.

    Args:
        name: Optional weapon name for display.
        uses_per_minute: Nominal firing rate, when known.
    """

    name: str | None = None
    uses_per_minute: float | None = None


@dataclass(frozen=True, slots=True)
class LoadoutInput:
    """Equipment configuration handle."""

    name: str | None = None
    weapon: WeaponInput | None = None

    def weapon_uses_per_minute(self) -> float | None:
        """Return the weapon firing rate when it is a positive finite number."""

        if self.weapon is None:
            return None
        rate = self.weapon.uses_per_minute
        if rate is None or not math.isfinite(rate) or rate <= 0:
            return None
        return rate

    @classmethod
    def from_payload(cls, payload: object) -> LoadoutInput | None:
        """Build a loadout handle from a payload, or None when absent."""

        if not isinstance(payload, Mapping):
            return None
        name = payload.get("name")
        weapon_payload = payload.get("weapon")
        weapon: WeaponInput | None = None
        if isinstance(weapon_payload, Mapping):
            weapon_name = weapon_payload.get("name")
            rate = _coerce_amount(weapon_payload.get("usesPerMinute"))
            weapon = WeaponInput(
                name=weapon_name if isinstance(weapon_name, str) else None,
                uses_per_minute=rate if rate > 0 else None,
            )
        return cls(name=name if isinstance(name, str) else None, weapon=weapon)


@dataclass(frozen=True, slots=True)
class SessionInput:
    """Session handle consumed by the engine.

    Args:
        id: Session identifier.
        started_at: Session start timestamp.
        ended_at: End timestamp; None while the session is live.
        event_count: Number of raw events recorded so far.
        snapshot: Current (live) or frozen (ended) stats snapshot.
    """

    id: str
    started_at: datetime | None = None
    ended_at: datetime | None = None
    event_count: int = 0
    snapshot: StatsSnapshot = field(default_factory=StatsSnapshot)

    @property
    def is_live(self) -> bool:
        """Return True while the session has no end timestamp."""

        return self.ended_at is None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, object] | None,
        *,
        stats: Mapping[str, object] | None = None,
    ) -> SessionInput:
        """Build a session handle from a payload and an optional stats payload.

        The event count is taken from `eventCount` when present, otherwise from
        the length of an `events` list.
        """

        payload = payload if isinstance(payload, Mapping) else {}
        event_count = _coerce_count(payload.get("eventCount"))
        events = payload.get("events")
        if "eventCount" not in payload and isinstance(events, list):
            event_count = len(events)

        raw_id = payload.get("id")
        return cls(
            id=str(raw_id) if raw_id is not None else "",
            started_at=_coerce_datetime(payload.get("startedAt")),
            ended_at=_coerce_datetime(payload.get("endedAt")),
            event_count=event_count,
            snapshot=StatsSnapshot.from_payload(stats),
        )


def _coerce_amount(value: object) -> float:
    """Coerce a payload value into a non-negative finite float (0.0 otherwise)."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    number = float(value)
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _coerce_count(value: object) -> int:
    """Coerce a payload value into a non-negative int (0 otherwise)."""

    return int(_coerce_amount(value))


def _coerce_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp string when safe."""

    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None
