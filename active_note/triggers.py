"""Maps host editor events onto immediate or debounced capture cycles."""
from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, List, Protocol, Tuple

from .debounce import DebounceCoordinator

FOCUS_CHANGED = "focus-changed"
KEY_RELEASED = "key-released"
POINTER_RELEASED = "pointer-released"

DEBOUNCED_EVENTS = (KEY_RELEASED, POINTER_RELEASED)

_LOGGER = logging.getLogger("ActiveNote.Triggers")

Handler = Callable[..., None]


class EventBus(Protocol):
    def subscribe(self, event: str, handler: Handler) -> object:
        ...

    def unsubscribe(self, token: object) -> None:
        ...


class LocalEventBus:
    """In-process bus for hosts that push events through plugin hooks."""

    def __init__(self) -> None:
        self._handlers: Dict[str, Dict[int, Handler]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, event: str, handler: Handler) -> Tuple[str, int]:
        token = (event, next(self._ids))
        self._handlers.setdefault(event, {})[token[1]] = handler
        return token

    def unsubscribe(self, token: object) -> None:
        if not isinstance(token, tuple) or len(token) != 2:
            return
        event, handler_id = token
        handlers = self._handlers.get(event)
        if handlers is not None:
            handlers.pop(handler_id, None)

    def emit(self, event: str, *args: Any) -> int:
        handlers = list(self._handlers.get(event, {}).values())
        for handler in handlers:
            try:
                handler(*args)
            except Exception as exc:
                _LOGGER.exception("Handler for %s failed: %s", event, exc)
        return len(handlers)

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, {}))


class EventTriggers:
    """Subscribes to focus, key and pointer events and drives the coordinator."""

    def __init__(
        self,
        bus: EventBus,
        coordinator: DebounceCoordinator,
        capture: Callable[[], None],
        interval_ms: Callable[[], int],
    ) -> None:
        self._bus = bus
        self._coordinator = coordinator
        self._capture = capture
        self._interval_ms = interval_ms
        self._tokens: List[object] = []

    @property
    def attached(self) -> bool:
        return bool(self._tokens)

    def attach(self) -> None:
        if self._tokens:
            return
        self._tokens.append(self._bus.subscribe(FOCUS_CHANGED, self.on_focus_changed))
        for event in DEBOUNCED_EVENTS:
            self._tokens.append(self._bus.subscribe(event, self.on_input_released))

    def detach(self) -> None:
        tokens, self._tokens = self._tokens, []
        for token in tokens:
            try:
                self._bus.unsubscribe(token)
            except Exception as exc:
                _LOGGER.debug("Unsubscribe failed for %r: %s", token, exc)

    def on_focus_changed(self, *_args: Any) -> None:
        self._coordinator.trigger_immediate(self._capture)

    def on_input_released(self, *_args: Any) -> None:
        self._coordinator.schedule(self._capture, self._interval_ms())
