"""Pinned (hero) metric selection.

The dashboard promotes exactly three metrics to a hero row. The selection is
an immutable value: every operation returns a new PinnedMetrics, so callers
persist the result explicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final

logger = logging.getLogger(__name__)

PINNED_SLOT_COUNT: Final = 3
EMPTY_SLOT: Final = ""
DEFAULT_PINNED_KEYS: Final[tuple[str, str, str]] = ("return_rate", "profit_loss", "total_kills")


@dataclass(frozen=True, slots=True)
class PinnedMetrics:
    """An ordered 3-slot selection of metric keys.

    Attributes:
        slots: Exactly three entries; `""` marks an empty slot. Non-empty
            entries are unique.
    """

    slots: tuple[str, str, str] = DEFAULT_PINNED_KEYS

    def __post_init__(self) -> None:
        """Enforce the fixed length and uniqueness of non-empty entries."""

        if len(self.slots) != PINNED_SLOT_COUNT:
            raise ValueError(f"Pinned selection must have {PINNED_SLOT_COUNT} slots, got {len(self.slots)}.")
        names = [name for name in self.slots if name != EMPTY_SLOT]
        if len(names) != len(set(names)):
            raise ValueError(f"Pinned selection contains duplicates: {self.slots!r}.")

    @classmethod
    def empty(cls) -> PinnedMetrics:
        """Return a selection with all slots empty."""

        return cls(slots=(EMPTY_SLOT, EMPTY_SLOT, EMPTY_SLOT))

    @classmethod
    def from_names(cls, names: Iterable[str]) -> PinnedMetrics:
        """Pack names left-to-right, dropping duplicates and blanks, padding to 3."""

        packed: list[str] = []
        for name in names:
            if not name or name in packed:
                continue
            packed.append(name)
            if len(packed) == PINNED_SLOT_COUNT:
                break
        return cls(slots=_pad(packed))

    @classmethod
    def from_value(cls, raw: object, *, default: PinnedMetrics | None = None) -> PinnedMetrics:
        """Coerce a persisted value into a selection.

        Args:
            raw: Value read from the settings store. Must be a list or tuple of
                exactly three strings to be accepted.
            default: Selection returned when `raw` is malformed.

        Returns:
            The stored selection (slot positions preserved, repeated names
            cleared), or `default` (the built-in default when None).
        """

        fallback = default if default is not None else cls()
        if not isinstance(raw, (list, tuple)) or len(raw) != PINNED_SLOT_COUNT:
            return fallback
        if not all(isinstance(name, str) for name in raw):
            return fallback

        seen: set[str] = set()
        slots: list[str] = []
        for name in raw:
            if name in seen:
                slots.append(EMPTY_SLOT)
                continue
            if name != EMPTY_SLOT:
                seen.add(name)
            slots.append(name)
        return cls(slots=(slots[0], slots[1], slots[2]))

    @property
    def names(self) -> tuple[str, ...]:
        """Return non-empty keys in slot order."""

        return tuple(name for name in self.slots if name != EMPTY_SLOT)

    @property
    def is_full(self) -> bool:
        """Return True when all three slots are filled."""

        return len(self.names) == PINNED_SLOT_COUNT

    def __contains__(self, key: object) -> bool:
        return key != EMPTY_SLOT and key in self.slots

    def toggle(self, key: str) -> PinnedMetrics:
        """Toggle a metric key in or out of the selection.

        - Present: removed; the remaining names keep their order, shift left,
          and the tail is padded with empty slots.
        - Absent with a free slot: placed in the leftmost empty slot.
        - Absent with all slots filled: rejected, the selection is unchanged.
        """

        if not key:
            return self
        if key in self.slots:
            return PinnedMetrics(slots=_pad([name for name in self.slots if name not in (key, EMPTY_SLOT)]))
        if self.is_full:
            logger.debug("Rejected pinning %r: all %d slots are filled.", key, PINNED_SLOT_COUNT)
            return self

        slots = list(self.slots)
        slots[slots.index(EMPTY_SLOT)] = key
        return PinnedMetrics(slots=(slots[0], slots[1], slots[2]))

    def replace(self, slot: int, key: str) -> PinnedMetrics:
        """Put `key` into a specific slot.

        When `key` already occupies another slot, the two slots swap so the
        selection stays free of duplicates. An empty `key` clears the slot.

        Raises:
            IndexError: When `slot` is outside 0..2.
        """

        if not 0 <= slot < PINNED_SLOT_COUNT:
            raise IndexError(f"Pinned slot must be in 0..{PINNED_SLOT_COUNT - 1}, got {slot}.")
        slots = list(self.slots)
        if key and key in slots:
            other = slots.index(key)
            slots[other] = slots[slot]
        slots[slot] = key
        return PinnedMetrics(slots=(slots[0], slots[1], slots[2]))

    def clear(self) -> PinnedMetrics:
        """Return a selection with every slot emptied."""

        return PinnedMetrics.empty()

    def to_value(self) -> list[str]:
        """Return the JSON-ready persisted form."""

        return list(self.slots)


def _pad(names: Sequence[str]) -> tuple[str, str, str]:
    """Pad a list of names on the right with empty slots."""

    padded = list(names)[:PINNED_SLOT_COUNT]
    padded.extend([EMPTY_SLOT] * (PINNED_SLOT_COUNT - len(padded)))
    return (padded[0], padded[1], padded[2])
