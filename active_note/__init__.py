"""Focus-state capture and pointer file pipeline for the Active Note plugin."""
from __future__ import annotations

from .debounce import DebounceCoordinator
from .pipeline import FocusPipeline
from .pointer_file import WriteResult, encode_snapshot, load_pointer, resolve_pointer_path, write_pointer
from .preferences import Preferences
from .schedulers import TimerScheduler, TkScheduler
from .snapshot import NO_SELECTION, Cursor, FocusSnapshot, NoSelection, SelectionRange, build_snapshot
from .triggers import FOCUS_CHANGED, KEY_RELEASED, POINTER_RELEASED, EventTriggers, LocalEventBus

__all__ = [
    "Cursor",
    "DebounceCoordinator",
    "EventTriggers",
    "FOCUS_CHANGED",
    "FocusPipeline",
    "FocusSnapshot",
    "KEY_RELEASED",
    "LocalEventBus",
    "NO_SELECTION",
    "NoSelection",
    "POINTER_RELEASED",
    "Preferences",
    "SelectionRange",
    "TimerScheduler",
    "TkScheduler",
    "WriteResult",
    "build_snapshot",
    "encode_snapshot",
    "load_pointer",
    "resolve_pointer_path",
    "write_pointer",
]
