"""Shared metric category definitions.

MetricCategory groups catalog entries for the configuration surface (the
stat picker tabs) and for the sectioned dashboard output.
"""

from __future__ import annotations

from enum import StrEnum


class MetricCategory(StrEnum):
    """Semantic category for a metric.

    Values are stable identifiers used across the registry, the JSON API and
    persisted layouts.
    """

    combat = "combat"
    economy = "economy"
    skills = "skills"
    efficiency = "efficiency"
    hourly = "hourly"
    time = "time"
