"""Flat JSON key/value store for overlay settings.

The store keeps an in-memory copy of the settings document and mirrors it to
a single JSON file. Persistence is best-effort: read and write failures are
logged and never propagate to the host application, and the in-memory state
always reflects the last requested change.

One store is shared by every request thread. All access to the in-memory
document goes through a reentrant lock, and each write replaces the file
atomically so readers never see a partial document.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

logger = logging.getLogger(__name__)


class SettingsStore:
    """JSON-file backed settings with an in-memory cache.

    Args:
        path: Location of the settings JSON file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._settings: dict[str, Any] = {}
        self._dirty = False
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: Path | str) -> SettingsStore:
        """Construct a store and load its current file contents."""

        store = cls(path)
        store.load()
        return store

    def __enter__(self) -> SettingsStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.flush()

    @contextmanager
    def locked(self) -> Iterator[SettingsStore]:
        """Hold the store lock across a read-modify-write sequence.

        Example:
            with store.locked():
                current = store.get("pinned_metrics")
                store.save({"pinned_metrics": updated(current)})
        """

        with self._lock:
            yield self

    def load(self) -> dict[str, Any]:
        """Load settings from disk.

        Returns:
            A copy of the loaded settings. A missing file yields `{}`; a
            corrupt file or a non-object document is logged and yields `{}`.
        """

        with self._lock:
            self._settings = self._read()
            self._dirty = False
            return copy.deepcopy(self._settings)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.info("No settings file at %s, using defaults.", self.path)
            return {}

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to load settings from %s.", self.path)
            return {}

        if not isinstance(payload, dict):
            logger.error("Ignoring settings file %s: expected a JSON object, got %s.", self.path, type(payload).__name__)
            return {}

        logger.debug("Settings loaded from %s.", self.path)
        return payload

    def save(self, partial: Mapping[str, Any]) -> None:
        """Merge `partial` into the settings and write them to disk."""

        with self._lock:
            self._settings.update(copy.deepcopy(dict(partial)))
            self._dirty = True
            self.flush()

    def flush(self) -> None:
        """Write pending in-memory changes to disk (best-effort).

        The document is written to a temporary sibling file and moved over the
        settings file, so an interrupted write leaves the previous file intact.
        """

        with self._lock:
            if not self._dirty:
                return
            try:
                self._write(json.dumps(self._settings, indent=2))
            except (OSError, TypeError, ValueError):
                logger.exception("Failed to save settings to %s.", self.path)
                return
            self._dirty = False
        logger.debug("Settings saved to %s.", self.path)

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_name, self.path)
        finally:
            Path(tmp_name).unlink(missing_ok=True)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a single setting, or `default` when missing."""

        with self._lock:
            if key not in self._settings:
                return default
            return copy.deepcopy(self._settings[key])

    def get_all(self) -> dict[str, Any]:
        """Return a defensive copy of every setting."""

        with self._lock:
            return copy.deepcopy(self._settings)

    def clear(self) -> None:
        """Reset in-memory settings and remove the settings file (best-effort)."""

        with self._lock:
            self._settings = {}
            self._dirty = False
            try:
                self.path.unlink(missing_ok=True)
            except OSError:
                logger.exception("Failed to clear settings file %s.", self.path)
                return
        logger.info("Settings cleared at %s.", self.path)
