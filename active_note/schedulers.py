"""``after``/``after_cancel`` pairs for the event loops the plugin can run under."""
from __future__ import annotations

import threading
from typing import Any, Callable


class TimerScheduler:
    """Daemon ``threading.Timer`` backend for hosts without their own loop.

    Expiries run on the timer thread.
    """

    def after(self, delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0, int(delay_ms)) / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer

    def after_cancel(self, handle: object) -> None:
        cancel = getattr(handle, "cancel", None)
        if callable(cancel):
            cancel()


class TkScheduler:
    """Routes timers through a Tk widget so expiries run on the Tk main loop."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def after(self, delay_ms: int, callback: Callable[[], None]) -> object:
        return self._widget.after(max(0, int(delay_ms)), callback)

    def after_cancel(self, handle: object) -> None:
        self._widget.after_cancel(handle)
