"""Preferences store for the Active Note plugin."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

PREFERENCES_FILE = "active_note_settings.json"
POINTER_FILENAME = "active-note.json"
DEBOUNCE_MS_DEFAULT = 300

_LOGGER = logging.getLogger("ActiveNote.Preferences")


def default_pointer_path(config_dir: str) -> str:
    """Return the pointer path used when no explicit path is configured."""

    return f"{config_dir}/{POINTER_FILENAME}"


def _coerce_debounce(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if not raw.is_integer():
            return None
        raw = int(raw)
    try:
        value = int(str(raw).strip(), 10)
    except (TypeError, ValueError):
        return None
    if value < 0:
        return None
    return value


@dataclass
class Preferences:
    """Simple JSON-backed preferences store.

    Loaded once when the plugin starts; the settings UI mutates it through the
    setters and calls :meth:`save`. Everything else only reads it.
    """

    plugin_dir: Path
    pointer_file_path: str = ""
    debounce_ms: int = DEBOUNCE_MS_DEFAULT

    def __post_init__(self) -> None:
        self.plugin_dir = Path(self.plugin_dir)
        self._path = self.plugin_dir / PREFERENCES_FILE
        self._load()

    # Persistence ---------------------------------------------------------

    def _load(self) -> None:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            _LOGGER.debug("Ignoring unreadable preferences file %s: %s", self._path, exc)
            return
        if not isinstance(data, dict):
            return
        pointer_path = data.get("pointerFilePath", "")
        self.pointer_file_path = pointer_path.strip() if isinstance(pointer_path, str) else ""
        debounce = _coerce_debounce(data.get("debounceMs", DEBOUNCE_MS_DEFAULT))
        self.debounce_ms = DEBOUNCE_MS_DEFAULT if debounce is None else debounce

    def save(self) -> None:
        payload: Dict[str, Any] = {
            "pointerFilePath": str(self.pointer_file_path or ""),
            "debounceMs": int(self.debounce_ms),
        }
        self.plugin_dir.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Mutation --------------------------------------------------------------

    def set_pointer_file_path(self, value: str) -> None:
        self.pointer_file_path = (value or "").strip()

    def set_debounce_ms(self, value: Any) -> bool:
        """Apply a debounce interval typed by the user; invalid input is ignored."""

        debounce = _coerce_debounce(value)
        if debounce is None:
            return False
        self.debounce_ms = debounce
        return True

    # Queries ---------------------------------------------------------------

    def pointer_relative_path(self, config_dir: str) -> str:
        return self.pointer_file_path or default_pointer_path(config_dir)
