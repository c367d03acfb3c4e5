from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

AfterFn = Callable[[int, Callable[[], None]], object]
AfterCancelFn = Callable[[object], None]

_LOGGER = logging.getLogger("ActiveNote.Debounce")

STATE_IDLE = "idle"
STATE_PENDING = "pending"


class DebounceCoordinator:
    """Owns the single pending capture timer; coalesces bursts into one run."""

    def __init__(
        self,
        *,
        after: AfterFn,
        after_cancel: AfterCancelFn,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._after = after
        self._after_cancel = after_cancel
        self._logger = logger or _LOGGER
        self._lock = threading.RLock()
        self._run_guard = threading.RLock()
        self._handle: object | None = None
        self._generation = 0
        self._fired_generation = -1
        self._closed = False

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._handle is not None

    @property
    def state(self) -> str:
        return STATE_PENDING if self.pending else STATE_IDLE

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, callback: Callable[[], None], delay_ms: int) -> object | None:
        """Re-arm the timer; only the last call inside a window runs ``callback``."""
        delay = max(0, int(delay_ms))
        with self._lock:
            if self._closed:
                return None
            self._cancel_locked()
            self._generation += 1
            generation = self._generation

            def _expire() -> None:
                self._expire(generation, callback)

            # Armed under the lock so a timer-thread expiry cannot run before the handle is stored.
            handle = self._after(delay, _expire)
            if self._fired_generation == generation:
                # Backend fired synchronously; nothing is pending.
                return handle
            self._handle = handle
            return handle

    def trigger_immediate(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._closed:
                return
            self._cancel_locked()
            self._generation += 1
        self._run(callback)

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1

    def close(self) -> None:
        """Cancel any pending run and refuse further work."""
        with self._lock:
            self._closed = True
            self._cancel_locked()
            self._generation += 1

    def _cancel_locked(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            self._safe_cancel(handle)

    def _safe_cancel(self, handle: object) -> None:
        try:
            self._after_cancel(handle)
        except Exception as exc:
            self._logger.debug("Timer cancel failed for %r: %s", handle, exc)

    def _expire(self, generation: int, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                return
            self._handle = None
            self._fired_generation = generation
        self._run(callback)

    def _run(self, callback: Callable[[], None]) -> None:
        with self._run_guard:
            try:
                callback()
            except Exception as exc:
                self._logger.exception("Capture cycle failed: %s", exc)
