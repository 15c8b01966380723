"""Integration tests for the JSON settings store."""

from __future__ import annotations

import json
import logging
import threading

import pytest

from overlay.settings_store import SettingsStore

pytestmark = pytest.mark.integration


def test_missing_file_loads_empty_defaults(tmp_path) -> None:
    store = SettingsStore(tmp_path / "absent" / "settings.json")

    assert store.load() == {}
    assert store.get_all() == {}
    assert store.get("pinned_metrics") is None
    assert store.get("pinned_metrics", "fallback") == "fallback"


def test_save_merges_and_round_trips(tmp_path) -> None:
    path = tmp_path / "nested" / "settings.json"
    store = SettingsStore.open(path)

    store.save({"apply_markup": True})
    store.save({"pinned_metrics": ["dps", "", ""]})

    reopened = SettingsStore.open(path)
    assert reopened.get_all() == {"apply_markup": True, "pinned_metrics": ["dps", "", ""]}
    assert json.loads(path.read_text(encoding="utf-8"))["apply_markup"] is True


def test_get_all_returns_defensive_copy(tmp_path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    store.save({"pinned_metrics": ["a", "b", "c"]})

    snapshot = store.get_all()
    snapshot["pinned_metrics"].append("d")
    value = store.get("pinned_metrics")
    value.clear()

    assert store.get("pinned_metrics") == ["a", "b", "c"]


def test_corrupt_file_is_logged_and_treated_as_empty(tmp_path, caplog) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="overlay.settings_store"):
        store = SettingsStore.open(path)

    assert store.get_all() == {}
    assert "Failed to load settings" in caplog.text


def test_non_object_document_is_ignored(tmp_path, caplog) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="overlay.settings_store"):
        assert SettingsStore(path).load() == {}

    assert "expected a JSON object" in caplog.text


def test_clear_removes_file_and_resets_memory(tmp_path) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    store.save({"apply_markup": True})

    store.clear()

    assert not path.exists()
    assert store.get_all() == {}
    assert store.load() == {}


def test_clear_without_file_is_harmless(tmp_path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    store.clear()

    assert store.get_all() == {}


def test_write_failure_keeps_in_memory_state(tmp_path, caplog) -> None:
    """A failed write is logged and swallowed; memory reflects the change."""

    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = SettingsStore(blocker / "settings.json")

    with caplog.at_level(logging.ERROR, logger="overlay.settings_store"):
        store.save({"apply_markup": True})

    assert store.get("apply_markup") is True
    assert "Failed to save settings" in caplog.text


def test_unserializable_value_is_logged(tmp_path, caplog) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore(path)

    with caplog.at_level(logging.ERROR, logger="overlay.settings_store"):
        store.save({"bad": object()})

    assert "Failed to save settings" in caplog.text
    assert "bad" in store.get_all()


def test_flush_only_writes_pending_changes(tmp_path) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore.open(path)

    store.flush()
    assert not path.exists()

    with store:
        store.save({"apply_additional_expenses": True})
    path.unlink()
    store.flush()

    assert not path.exists()


def test_concurrent_reads_during_saves(tmp_path) -> None:
    """Readers never observe the document mid-update."""

    store = SettingsStore(tmp_path / "settings.json")
    stop = threading.Event()
    errors: list[Exception] = []

    def reader() -> None:
        while not stop.is_set():
            try:
                store.get_all()
            except Exception as exc:
                errors.append(exc)
                return

    thread = threading.Thread(target=reader)
    thread.start()
    try:
        for index in range(300):
            store.save({f"k{index}": index})
    finally:
        stop.set()
        thread.join()

    assert errors == []
    assert len(SettingsStore.open(store.path).get_all()) == 300


def test_save_replaces_file_without_leftover_temp_files(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"apply_markup": false}', encoding="utf-8")
    store = SettingsStore.open(path)

    store.save({"apply_markup": True})

    assert [entry.name for entry in tmp_path.iterdir()] == ["settings.json"]
    assert json.loads(path.read_text(encoding="utf-8")) == {"apply_markup": True}


def test_failed_write_keeps_previous_file(tmp_path, caplog) -> None:
    """A serialization failure leaves the last good document on disk."""

    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    store.save({"apply_markup": True})

    with caplog.at_level(logging.ERROR, logger="overlay.settings_store"):
        store.save({"bad": object()})

    assert json.loads(path.read_text(encoding="utf-8")) == {"apply_markup": True}
    assert [entry.name for entry in tmp_path.iterdir()] == ["settings.json"]
