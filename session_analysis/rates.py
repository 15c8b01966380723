"""Rate calculations for session analysis.

Every rate here is zero-guarded: a zero (or negative) denominator yields 0.0
instead of an exception or infinity.
"""

from __future__ import annotations

SECONDS_PER_HOUR = 3600.0


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return `numerator / denominator`, or 0.0 when the denominator is not positive."""

    if denominator <= 0:
        return 0.0
    return numerator / denominator


def percentage(part: float, whole: float) -> float:
    """Return `part / whole * 100`, or 0.0 when `whole` is not positive."""

    return safe_ratio(part, whole) * 100.0


def per_hour(quantity: float, elapsed_seconds: float) -> float:
    """Project a session quantity onto an hourly rate.

    Args:
        quantity: Accumulated quantity (loot, spend, damage, skills, kills).
        elapsed_seconds: Elapsed session time in seconds.

    Returns:
        `(quantity / elapsed_seconds) * 3600`, or 0.0 when no time has elapsed.
    """

    return safe_ratio(quantity, elapsed_seconds) * SECONDS_PER_HOUR
