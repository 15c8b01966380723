"""Derived metrics calculator.

Turns a stats snapshot plus the markup / additional-expense toggles into the
secondary scalars the metric catalog reads (return rate, profit/loss, hit
rate, DPS, DPP, hourly projections). The module is pure: no I/O and no
exceptions for partial data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import StrEnum

from .rates import per_hour, percentage, safe_ratio
from .snapshot import StatsSnapshot

DEFAULT_MARKUP_MULTIPLIER = 1.05
DEFAULT_ADDITIONAL_EXPENSE_RATE = 0.02


class RateMode(StrEnum):
    """Which branch of a dual-mode efficiency formula produced a value."""

    weapon_rate = "weapon_rate"
    elapsed_time = "elapsed_time"
    spend = "spend"
    unavailable = "unavailable"


@dataclass(frozen=True, slots=True)
class AdjustmentConfig:
    """Tunable constants for the markup and additional-expense toggles.

    Args:
        markup_multiplier: Multiplier applied to loot value when markup is on.
        additional_expense_rate: Fraction of total spend added when
            additional expenses are on.
    """

    markup_multiplier: float = DEFAULT_MARKUP_MULTIPLIER
    additional_expense_rate: float = DEFAULT_ADDITIONAL_EXPENSE_RATE

    def __post_init__(self) -> None:
        """Reject non-finite or out-of-range constants."""

        if not math.isfinite(self.markup_multiplier) or self.markup_multiplier <= 0:
            raise ValueError(f"markup_multiplier must be a positive number, got {self.markup_multiplier!r}.")
        if not math.isfinite(self.additional_expense_rate) or self.additional_expense_rate < 0:
            raise ValueError(
                f"additional_expense_rate must be a non-negative number, got {self.additional_expense_rate!r}."
            )


@dataclass(frozen=True, slots=True)
class DerivedMetrics:
    """Secondary scalars computed from a snapshot.

    Attributes:
        markup_multiplier: Multiplier actually applied to loot (1.0 when off).
        additional_expenses: Extra spend added by the expense toggle.
        adjusted_loot: `loot_value * markup_multiplier`.
        adjusted_spend: `total_spend + additional_expenses`.
        return_rate: Adjusted loot as a percentage of adjusted spend.
        profit_loss: `adjusted_loot - adjusted_spend` (may be negative).
        skills_per_ped: Skill gains per unit of adjusted spend.
        hit_rate: Hits as a percentage of shots.
        crit_rate: Criticals as a percentage of hits.
        dps: Damage per second (weapon-rate or elapsed-time based).
        dpp: Damage per PEC (weapon-rate or spend based).
        dps_mode: Branch used for `dps`.
        dpp_mode: Branch used for `dpp`.
        loot_per_hour: Hourly projection of adjusted loot.
        spend_per_hour: Hourly projection of adjusted spend.
        profit_per_hour: Hourly projection of profit/loss (may be negative).
        damage_per_hour: Hourly projection of damage dealt.
        skills_per_hour: Hourly projection of skill gains.
        kills_per_hour: Hourly projection of kills.
        combat_time: Elapsed session seconds used for projections.
        event_count: Number of raw events recorded for the session.
    """

    markup_multiplier: float = 1.0
    additional_expenses: float = 0.0
    adjusted_loot: float = 0.0
    adjusted_spend: float = 0.0
    return_rate: float = 0.0
    profit_loss: float = 0.0
    skills_per_ped: float = 0.0
    hit_rate: float = 0.0
    crit_rate: float = 0.0
    dps: float = 0.0
    dpp: float = 0.0
    dps_mode: RateMode = RateMode.unavailable
    dpp_mode: RateMode = RateMode.unavailable
    loot_per_hour: float = 0.0
    spend_per_hour: float = 0.0
    profit_per_hour: float = 0.0
    damage_per_hour: float = 0.0
    skills_per_hour: float = 0.0
    kills_per_hour: float = 0.0
    combat_time: float = 0.0
    event_count: int = 0

    def as_dict(self) -> dict[str, float | int | str]:
        """Return a JSON-ready mapping of every scalar."""

        return {item.name: getattr(self, item.name) for item in fields(self)}


def compute_derived_metrics(
    snapshot: StatsSnapshot,
    *,
    apply_markup: bool,
    apply_additional_expenses: bool,
    weapon_uses_per_minute: float | None = None,
    event_count: int = 0,
    config: AdjustmentConfig | None = None,
) -> DerivedMetrics:
    """Compute derived scalars for a snapshot.

    Args:
        snapshot: Current or frozen session snapshot.
        apply_markup: Whether loot value is multiplied by the markup multiplier.
        apply_additional_expenses: Whether a fraction of total spend is added.
        weapon_uses_per_minute: Nominal weapon firing rate, when known. Selects
            the rate-based DPS/DPP branch.
        event_count: Number of raw events in the session.
        config: Optional AdjustmentConfig overriding the default constants.

    Returns:
        DerivedMetrics; every ratio with a zero denominator is 0.0.
    """

    config = config or AdjustmentConfig()

    markup_multiplier = config.markup_multiplier if apply_markup else 1.0
    additional_expenses = snapshot.total_spend * config.additional_expense_rate if apply_additional_expenses else 0.0
    adjusted_loot = snapshot.loot_value * markup_multiplier
    adjusted_spend = snapshot.total_spend + additional_expenses

    dps, dps_mode = damage_per_second(
        damage_dealt=snapshot.damage_dealt,
        shots=snapshot.shots,
        duration=snapshot.duration,
        weapon_uses_per_minute=weapon_uses_per_minute,
    )
    dpp, dpp_mode = damage_per_pec(
        damage_dealt=snapshot.damage_dealt,
        shots=snapshot.shots,
        adjusted_spend=adjusted_spend,
        weapon_uses_per_minute=weapon_uses_per_minute,
    )

    elapsed = snapshot.duration
    return DerivedMetrics(
        markup_multiplier=markup_multiplier,
        additional_expenses=additional_expenses,
        adjusted_loot=adjusted_loot,
        adjusted_spend=adjusted_spend,
        return_rate=percentage(adjusted_loot, adjusted_spend),
        profit_loss=adjusted_loot - adjusted_spend,
        skills_per_ped=safe_ratio(snapshot.skill_gains, adjusted_spend),
        hit_rate=percentage(snapshot.hits, snapshot.shots),
        crit_rate=percentage(snapshot.criticals, snapshot.hits),
        dps=dps,
        dpp=dpp,
        dps_mode=dps_mode,
        dpp_mode=dpp_mode,
        loot_per_hour=per_hour(adjusted_loot, elapsed),
        spend_per_hour=per_hour(adjusted_spend, elapsed),
        profit_per_hour=per_hour(adjusted_loot - adjusted_spend, elapsed),
        damage_per_hour=per_hour(snapshot.damage_dealt, elapsed),
        skills_per_hour=per_hour(snapshot.skills.total_skill_gains, elapsed),
        kills_per_hour=per_hour(snapshot.kills, elapsed),
        combat_time=elapsed,
        event_count=max(event_count, 0),
    )


def damage_per_second(
    *,
    damage_dealt: float,
    shots: int,
    duration: float,
    weapon_uses_per_minute: float | None,
) -> tuple[float, RateMode]:
    """Compute DPS using the weapon firing rate when known.

    Formula:
        weapon rate known and shots > 0: (damage / shots) * (uses_per_minute / 60)
        else duration > 0: damage / duration
        else 0

    Returns:
        A `(dps, mode)` tuple.
    """

    rate = weapon_uses_per_minute if _rate_known(weapon_uses_per_minute) else None
    if rate is not None and shots > 0:
        return (damage_dealt / shots) * (rate / 60.0), RateMode.weapon_rate
    if duration > 0:
        return damage_dealt / duration, RateMode.elapsed_time
    return 0.0, RateMode.unavailable


def damage_per_pec(
    *,
    damage_dealt: float,
    shots: int,
    adjusted_spend: float,
    weapon_uses_per_minute: float | None,
) -> tuple[float, RateMode]:
    """Compute DPP (damage per PEC, 1 PED = 100 PEC).

    Formula:
        weapon rate known and shots > 0: damage / shots / ((spend / shots) * 100)
        else spend > 0: damage / (spend * 100)
        else 0

    The per-shot branch yields 0 when no spend has been recorded yet.

    Returns:
        A `(dpp, mode)` tuple.
    """

    if _rate_known(weapon_uses_per_minute) and shots > 0:
        cost_per_shot_pec = (adjusted_spend / shots) * 100.0
        return safe_ratio(damage_dealt / shots, cost_per_shot_pec), RateMode.weapon_rate
    if adjusted_spend > 0:
        return damage_dealt / (adjusted_spend * 100.0), RateMode.spend
    return 0.0, RateMode.unavailable


def _rate_known(weapon_uses_per_minute: float | None) -> bool:
    """Return True when a weapon firing rate is a positive finite number."""

    return (
        weapon_uses_per_minute is not None
        and math.isfinite(weapon_uses_per_minute)
        and weapon_uses_per_minute > 0
    )
