from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Protocol

from .snapshot import FocusedDocument, SelectionQuery
from .triggers import EventBus


class EditorHost(Protocol):
    """What a host editor hands the plugin at startup.

    Hosts may additionally expose ``line_base`` (indexing base of cursor
    lines, default 0) and a ``log(message)`` diagnostic channel or a
    ``logger`` attribute holding a :class:`logging.Logger`. A host without
    ``after``/``after_cancel`` gets daemon threading timers, so its expiries
    run off the host thread.
    """

    config_dir: str
    events: EventBus

    def storage_root(self) -> Path:
        ...

    def focused_document(self) -> Optional[FocusedDocument]:
        ...

    def selection_query(self) -> Optional[SelectionQuery]:
        ...

    def after(self, delay_ms: int, callback: Callable[[], None]) -> object:
        ...

    def after_cancel(self, handle: object) -> None:
        ...


def host_line_base(host: object) -> int:
    try:
        return int(getattr(host, "line_base", 0))
    except (TypeError, ValueError):
        return 0
