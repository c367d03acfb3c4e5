from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest

from active_note.snapshot import Cursor
from active_note.triggers import LocalEventBus


def pytest_runtest_setup(item):
    if item.get_closest_marker("pyqt_required"):
        if not os.getenv("PYQT_TESTS"):
            pytest.skip("PYQT_TESTS not set; skipping PyQt-dependent test")


class AfterHarness:
    """Records ``after`` calls on a virtual millisecond clock."""

    def __init__(self) -> None:
        self.now = 0
        self.scheduled: list[tuple[str, int, Callable[[], None]]] = []
        self.cancelled: list[object] = []
        self._due: dict[str, int] = {}

    def after(self, ms: int, cb) -> str:
        handle = f"h{len(self.scheduled) + 1}"
        self.scheduled.append((handle, ms, cb))
        self._due[handle] = self.now + ms
        return handle

    def cancel(self, handle: object) -> None:
        self.cancelled.append(handle)
        self._due.pop(handle, None)  # type: ignore[arg-type]

    def due_at(self, handle: str) -> int:
        return self._due[handle]

    def live(self) -> list[str]:
        return sorted(self._due, key=self._due.__getitem__)

    def run(self, handle: str) -> None:
        for h, _ms, cb in list(self.scheduled):
            if h == handle:
                self._due.pop(h, None)
                cb()
                return
        raise AssertionError(f"Handle {handle} not found")

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            ready = [h for h in self.live() if self._due[h] <= target]
            if not ready:
                break
            handle = ready[0]
            self.now = self._due[handle]
            self.run(handle)
        self.now = target


class FakeDocument:
    def __init__(self, path: str) -> None:
        self.path = path


class FakeEditor:
    """Selection query over a mutable text/cursor state."""

    def __init__(self) -> None:
        self.text = ""
        self.anchor = Cursor(0)
        self.head = Cursor(0)
        self.fail = False

    def select(self, text: str, anchor_line: int, head_line: int) -> None:
        self.text = text
        self.anchor = Cursor(anchor_line)
        self.head = Cursor(head_line)

    def selected_text(self) -> str:
        if self.fail:
            raise RuntimeError("view closed")
        return self.text

    def selection_cursors(self) -> Tuple[Cursor, Cursor]:
        if self.fail:
            raise RuntimeError("view closed")
        return self.anchor, self.head


class FakeHost:
    config_dir = ".editor"

    def __init__(self, root: Path, harness: AfterHarness) -> None:
        self.root = root
        self.harness = harness
        self.events = LocalEventBus()
        self.document: Optional[FakeDocument] = None
        self.editor = FakeEditor()
        self.messages: List[str] = []

    def open(self, path: str) -> None:
        self.document = FakeDocument(path)
        self.editor = FakeEditor()

    def storage_root(self) -> Path:
        return self.root

    def focused_document(self) -> Optional[FakeDocument]:
        return self.document

    def selection_query(self) -> FakeEditor:
        return self.editor

    def after(self, delay_ms: int, callback) -> str:
        return self.harness.after(delay_ms, callback)

    def after_cancel(self, handle: object) -> None:
        self.harness.cancel(handle)

    def log(self, message: str) -> None:
        self.messages.append(message)


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: int = logging.DEBUG) -> list[str]:
        return [r.getMessage() for r in self.records if r.levelno >= level]


@pytest.fixture
def harness() -> AfterHarness:
    return AfterHarness()


@pytest.fixture
def host(tmp_path: Path, harness: AfterHarness) -> FakeHost:
    (tmp_path / FakeHost.config_dir).mkdir()
    return FakeHost(tmp_path, harness)


@pytest.fixture
def capture_logs():
    attached: list[tuple[logging.Logger, ListHandler, int]] = []

    def _attach(name: str) -> ListHandler:
        logger = logging.getLogger(name)
        handler = ListHandler()
        attached.append((logger, handler, logger.level))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        return handler

    yield _attach
    for logger, handler, level in attached:
        logger.removeHandler(handler)
        logger.setLevel(level)
