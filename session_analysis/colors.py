"""Color tokens and classifiers for rendered metrics.

The engine emits semantic tokens; the UI layer owns the palette. `TOKEN_HEX`
carries the overlay's default palette for hosts that want a ready value.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Final


class ColorToken(StrEnum):
    """Semantic color classes for a metric value."""

    positive = "positive"
    warning = "warning"
    negative = "negative"
    neutral = "neutral"


TOKEN_HEX: Final[dict[ColorToken, str]] = {
    ColorToken.positive: "#4ade80",
    ColorToken.warning: "#fbbf24",
    ColorToken.negative: "#ef4444",
    ColorToken.neutral: "hsl(0 0% 95%)",
}

Classifier = Callable[[float], ColorToken]


def threshold_classifier(*, good: float, warn: float) -> Classifier:
    """Classify higher-is-better values against two thresholds.

    Args:
        good: Values `>= good` are positive.
        warn: Values `>= warn` (and below `good`) are warnings; lower values
            are negative.
    """

    def _classify(value: float) -> ColorToken:
        if value >= good:
            return ColorToken.positive
        if value >= warn:
            return ColorToken.warning
        return ColorToken.negative

    return _classify


def sign_classifier(value: float) -> ColorToken:
    """Classify gains (>= 0) as positive and losses as negative."""

    return ColorToken.positive if value >= 0 else ColorToken.negative


def fixed_classifier(token: ColorToken) -> Classifier:
    """Return a classifier that always yields `token`."""

    def _classify(_value: float) -> ColorToken:
        return token

    return _classify
