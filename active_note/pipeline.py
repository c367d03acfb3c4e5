"""Capture-and-write pipeline tying the host, preferences and triggers together."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .debounce import DebounceCoordinator
from .host import EditorHost, host_line_base
from .pointer_file import WriteResult, resolve_pointer_path, write_pointer
from .preferences import Preferences
from .schedulers import TimerScheduler
from .snapshot import FocusSnapshot, build_snapshot
from .triggers import EventTriggers

_LOGGER = logging.getLogger("ActiveNote.Pipeline")


def _host_scheduler(host: object):
    """Use the host's own timers, or daemon threading timers when it has none."""
    if callable(getattr(host, "after", None)) and callable(getattr(host, "after_cancel", None)):
        return host
    _LOGGER.debug("Host supplies no timers; falling back to threading timers")
    return TimerScheduler()


class FocusPipeline:
    """Mirrors the host's focus state into the pointer file."""

    def __init__(
        self,
        host: EditorHost,
        preferences: Preferences,
        *,
        coordinator: Optional[DebounceCoordinator] = None,
    ) -> None:
        self.host = host
        self.preferences = preferences
        self.scheduler = _host_scheduler(host)
        self.coordinator = coordinator or self._new_coordinator()
        self.triggers = self._new_triggers()
        self.last_result: Optional[WriteResult] = None
        self._last_error: Optional[str] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def _new_coordinator(self) -> DebounceCoordinator:
        return DebounceCoordinator(
            after=self.scheduler.after,
            after_cancel=self.scheduler.after_cancel,
            logger=_LOGGER,
        )

    def _new_triggers(self) -> EventTriggers:
        return EventTriggers(
            self.host.events,
            self.coordinator,
            self._run_cycle,
            lambda: self.preferences.debounce_ms,
        )

    def start(self) -> None:
        if self._running:
            return
        if self.coordinator.closed:
            # Restart after stop(); a closed coordinator never runs again.
            self.coordinator = self._new_coordinator()
            self.triggers = self._new_triggers()
        self.triggers.attach()
        self._running = True
        _LOGGER.debug(
            "Focus pipeline started: pointer=%s debounce_ms=%d",
            self.pointer_path(),
            self.preferences.debounce_ms,
        )

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self.triggers.detach()
        self.coordinator.close()
        _LOGGER.debug("Focus pipeline stopped")

    def on_preferences_updated(self) -> None:
        _LOGGER.debug(
            "Preferences updated: pointer=%s debounce_ms=%d",
            self.pointer_path(),
            self.preferences.debounce_ms,
        )

    def pointer_path(self) -> Path:
        relative = self.preferences.pointer_relative_path(self.host.config_dir)
        return resolve_pointer_path(self.host.storage_root(), relative)

    def capture(self) -> Optional[FocusSnapshot]:
        try:
            document = self.host.focused_document()
        except Exception as exc:
            _LOGGER.debug("Focused document query failed: %s", exc)
            return None
        if document is None:
            return None
        try:
            selection = self.host.selection_query()
        except Exception as exc:
            _LOGGER.debug("Selection query unavailable: %s", exc)
            selection = None
        return build_snapshot(document, selection, line_base=host_line_base(self.host))

    def capture_and_write(self) -> Optional[WriteResult]:
        snapshot = self.capture()
        if snapshot is None:
            _LOGGER.debug("No focused document; skipping pointer write")
            return None
        try:
            target = self.pointer_path()
        except Exception as exc:
            result = WriteResult(ok=False, path=Path(), error=f"{type(exc).__name__}: {exc}")
        else:
            result = write_pointer(snapshot, target)
        self._report(result)
        self.last_result = result
        return result

    def _run_cycle(self) -> None:
        self.capture_and_write()

    def _report(self, result: WriteResult) -> None:
        if result.ok:
            if self._last_error is not None:
                _LOGGER.info("Pointer file writes recovered: %s", result.path)
            self._last_error = None
            return
        if result.error != self._last_error:
            _LOGGER.error("Failed to write pointer file %s: %s", result.path, result.error)
        else:
            _LOGGER.debug("Pointer write still failing for %s: %s", result.path, result.error)
        self._last_error = result.error
