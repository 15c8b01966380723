"""Display formatters for metric values.

Formatters map a numeric value to a display string. They are plain callables
so catalog entries can reference them directly; the factories below build the
handful of shapes the catalog uses. Fixed-point output rounds ties half-up,
so `12.25` renders as `12.3` at one decimal place.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal

Formatter = Callable[[float], str]

CURRENCY_UNIT = "PED"


def fixed_point(value: float, places: int) -> str:
    """Render `value` with `places` decimals, rounding ties half-up.

    Args:
        value: Number to render. Non-finite values render as 0.
        places: Number of decimal places (0 for whole numbers).

    Returns:
        The fixed-point string, e.g. `fixed_point(0.125, 2) == "0.13"`.
    """

    if not math.isfinite(value):
        value = 0.0
    rounded = Decimal(str(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return f"{rounded:f}"


def decimal_formatter(places: int) -> Formatter:
    """Return a formatter rendering a fixed number of decimal places."""

    def _format(value: float) -> str:
        return fixed_point(value, places)

    return _format


def percent_formatter(places: int = 1) -> Formatter:
    """Return a formatter rendering a percentage, e.g. `125.0%`."""

    def _format(value: float) -> str:
        return f"{fixed_point(value, places)}%"

    return _format


def format_ped(value: float) -> str:
    """Format a currency amount with two decimals and the PED unit."""

    return f"{fixed_point(value, 2)} {CURRENCY_UNIT}"


def format_count(value: float) -> str:
    """Format a counter without a trailing `.0` for whole numbers."""

    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return str(value)


def format_duration(seconds: float) -> str:
    """Format elapsed seconds as `{minutes}m {seconds}s`."""

    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    return f"{int(seconds // 60)}m {int(seconds % 60)}s"
