from __future__ import annotations

import json
from pathlib import Path

import pytest

from active_note.preferences import (
    DEBOUNCE_MS_DEFAULT,
    PREFERENCES_FILE,
    Preferences,
    default_pointer_path,
)


def test_defaults_when_file_missing(tmp_path: Path):
    prefs = Preferences(tmp_path)
    assert prefs.pointer_file_path == ""
    assert prefs.debounce_ms == DEBOUNCE_MS_DEFAULT == 300
    assert prefs.pointer_relative_path(".obsidian") == ".obsidian/active-note.json"


def test_loads_saved_values(tmp_path: Path):
    (tmp_path / PREFERENCES_FILE).write_text(
        json.dumps({"pointerFilePath": " state/pointer.json ", "debounceMs": 120}),
        encoding="utf-8",
    )
    prefs = Preferences(tmp_path)
    assert prefs.pointer_file_path == "state/pointer.json"
    assert prefs.debounce_ms == 120
    assert prefs.pointer_relative_path(".obsidian") == "state/pointer.json"


@pytest.mark.parametrize("raw", [-1, "abc", None, True, 1.5, [300]])
def test_invalid_debounce_falls_back_to_default(tmp_path: Path, raw):
    (tmp_path / PREFERENCES_FILE).write_text(json.dumps({"debounceMs": raw}), encoding="utf-8")
    assert Preferences(tmp_path).debounce_ms == DEBOUNCE_MS_DEFAULT


def test_string_debounce_is_accepted(tmp_path: Path):
    (tmp_path / PREFERENCES_FILE).write_text(json.dumps({"debounceMs": "0"}), encoding="utf-8")
    assert Preferences(tmp_path).debounce_ms == 0


def test_malformed_file_uses_defaults(tmp_path: Path):
    (tmp_path / PREFERENCES_FILE).write_text("{oops", encoding="utf-8")
    prefs = Preferences(tmp_path)
    assert prefs.debounce_ms == DEBOUNCE_MS_DEFAULT
    (tmp_path / PREFERENCES_FILE).write_text("[]", encoding="utf-8")
    assert Preferences(tmp_path).pointer_file_path == ""


def test_save_round_trips_through_disk(tmp_path: Path):
    prefs = Preferences(tmp_path / "plugin")
    prefs.set_pointer_file_path("  custom.json ")
    assert prefs.set_debounce_ms("45") is True
    prefs.save()

    stored = json.loads((tmp_path / "plugin" / PREFERENCES_FILE).read_text(encoding="utf-8"))
    assert stored == {"pointerFilePath": "custom.json", "debounceMs": 45}
    reloaded = Preferences(tmp_path / "plugin")
    assert reloaded.pointer_file_path == "custom.json"
    assert reloaded.debounce_ms == 45


def test_set_debounce_ignores_invalid_input(tmp_path: Path):
    prefs = Preferences(tmp_path)
    assert prefs.set_debounce_ms("-5") is False
    assert prefs.set_debounce_ms("soon") is False
    assert prefs.debounce_ms == DEBOUNCE_MS_DEFAULT


def test_default_pointer_path_uses_config_dir():
    assert default_pointer_path(".obsidian") == ".obsidian/active-note.json"


def test_whole_float_debounce_is_accepted(tmp_path: Path):
    (tmp_path / PREFERENCES_FILE).write_text(json.dumps({"debounceMs": 300.0}), encoding="utf-8")
    assert Preferences(tmp_path).debounce_ms == 300
    prefs = Preferences(tmp_path / "other")
    assert prefs.set_debounce_ms(120.0) is True
    assert prefs.debounce_ms == 120
    assert prefs.set_debounce_ms(1.5) is False
    assert prefs.debounce_ms == 120
