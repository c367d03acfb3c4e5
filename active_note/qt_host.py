"""PyQt6 editor host: feeds focus, key and mouse events from text widgets into the plugin."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Set, Tuple, Union

from PyQt6.QtCore import QEvent, QObject, QTimer
from PyQt6.QtWidgets import QApplication, QPlainTextEdit, QTextEdit, QWidget

from .snapshot import Cursor
from .triggers import FOCUS_CHANGED, KEY_RELEASED, POINTER_RELEASED, LocalEventBus

DOCUMENT_PATH_PROPERTY = "documentPath"
PARAGRAPH_SEPARATOR = "\u2029"

_LOGGER = logging.getLogger("ActiveNote.QtHost")

TextWidget = Union[QPlainTextEdit, QTextEdit]


class QtScheduler:
    """Single-shot ``QTimer`` backend; expiries run on the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._timers: Set[QTimer] = set()

    def after(self, delay_ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay_ms)))

        def _fire() -> None:
            self._timers.discard(timer)
            timer.deleteLater()
            callback()

        timer.timeout.connect(_fire)
        self._timers.add(timer)
        timer.start()
        return timer

    def after_cancel(self, handle: object) -> None:
        if not isinstance(handle, QTimer):
            return
        handle.stop()
        if handle in self._timers:
            self._timers.discard(handle)
            handle.deleteLater()

    def active_count(self) -> int:
        return sum(1 for timer in self._timers if timer.isActive())


class QtDocument:
    def __init__(self, path: str) -> None:
        self.path = path


class QtSelection:
    """Selection query bound to one text widget."""

    def __init__(self, widget: TextWidget) -> None:
        self._widget = widget

    def selected_text(self) -> str:
        return self._widget.textCursor().selectedText().replace(PARAGRAPH_SEPARATOR, "\n")

    def selection_cursors(self) -> Tuple[Cursor, Cursor]:
        cursor = self._widget.textCursor()
        document = self._widget.document()
        anchor_block = document.findBlock(cursor.anchor())
        head_block = document.findBlock(cursor.position())
        return (
            Cursor(anchor_block.blockNumber(), cursor.anchor() - anchor_block.position()),
            Cursor(head_block.blockNumber(), cursor.position() - head_block.position()),
        )


def widget_document_path(widget: QWidget) -> str:
    value = widget.property(DOCUMENT_PATH_PROPERTY)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return widget.objectName().strip()


class _InputEventFilter(QObject):
    """App-wide filter; only releases delivered to the focused editor count."""

    def __init__(
        self,
        bus: LocalEventBus,
        accepts: Callable[[QObject, bool], bool],
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._bus = bus
        self._accepts = accepts

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802 - Qt override
        event_type = event.type()
        if event_type not in (QEvent.Type.KeyRelease, QEvent.Type.MouseButtonRelease):
            return False
        # Propagation to parents passes the same event through here again.
        if not self._accepts(watched, event_type == QEvent.Type.MouseButtonRelease):
            return False
        if event_type == QEvent.Type.KeyRelease:
            self._bus.emit(KEY_RELEASED)
        elif event_type == QEvent.Type.MouseButtonRelease:
            self._bus.emit(POINTER_RELEASED)
        return False


class QtEditorHost:
    """Editor host backed by the text widgets of a running ``QApplication``.

    A widget takes part when it is a ``QPlainTextEdit``/``QTextEdit`` carrying a
    ``documentPath`` dynamic property or a non-empty object name.
    """

    line_base = 0

    def __init__(self, app: QApplication, storage_root: Path, config_dir: str = ".active-note") -> None:
        self._app = app
        self._root = Path(storage_root)
        self.config_dir = config_dir
        self.events = LocalEventBus()
        self._scheduler = QtScheduler(app)
        self._filter = _InputEventFilter(self.events, self._is_input_target, app)
        self._focused: Optional[TextWidget] = None
        self._installed = False

    def install(self) -> None:
        if self._installed:
            return
        self._app.installEventFilter(self._filter)
        self._app.focusChanged.connect(self._on_focus_changed)
        self._installed = True

    def uninstall(self) -> None:
        if not self._installed:
            return
        self._app.removeEventFilter(self._filter)
        try:
            self._app.focusChanged.disconnect(self._on_focus_changed)
        except TypeError:
            pass
        self._installed = False

    def _on_focus_changed(self, _old: Optional[QWidget], new: Optional[QWidget]) -> None:
        if isinstance(new, (QPlainTextEdit, QTextEdit)) and widget_document_path(new):
            if new is self._focused:
                return
            self._focused = new
            self.events.emit(FOCUS_CHANGED)
        elif new is not None and self._focused is not None:
            # Focus left the editors (tool panel, dialog); keep the last document.
            _LOGGER.debug("Focus moved to non-editor widget %r", new)

    def _is_input_target(self, obj: QObject, mouse: bool) -> bool:
        """Keys arrive on the focused editor, clicks on its viewport."""
        widget = self._focused
        if widget is None:
            return False
        if not mouse:
            return obj is widget
        try:
            return obj is widget.viewport()
        except RuntimeError:
            return False

    def focus_widget(self, widget: TextWidget) -> None:
        """Mark ``widget`` as focused without relying on window activation."""
        self._on_focus_changed(None, widget)

    def storage_root(self) -> Path:
        return self._root

    def focused_document(self) -> Optional[QtDocument]:
        widget = self._focused
        if widget is None:
            return None
        try:
            path = widget_document_path(widget)
        except RuntimeError:
            # Underlying C++ widget already deleted.
            self._focused = None
            return None
        return QtDocument(path) if path else None

    def selection_query(self) -> Optional[QtSelection]:
        widget = self._focused
        return QtSelection(widget) if widget is not None else None

    def after(self, delay_ms: int, callback: Callable[[], None]) -> QTimer:
        return self._scheduler.after(delay_ms, callback)

    def after_cancel(self, handle: object) -> None:
        self._scheduler.after_cancel(handle)
