"""Immutable focus snapshots and the builder that captures them from an editor."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple, Union

_LOGGER = logging.getLogger("ActiveNote.Snapshot")


@dataclass(frozen=True)
class Cursor:
    """Host-neutral cursor position; ``line`` uses the host's own indexing base."""

    line: int
    ch: int = 0


class CursorLike(Protocol):
    line: int


class FocusedDocument(Protocol):
    path: str


class SelectionQuery(Protocol):
    """Read-only access to the active editor selection."""

    def selected_text(self) -> str:
        ...

    def selection_cursors(self) -> Tuple[CursorLike, CursorLike]:
        """Return ``(anchor, head)`` in whichever order the user dragged."""
        ...


@dataclass(frozen=True)
class NoSelection:
    """Marker variant for a snapshot without selected text."""

    def to_payload(self) -> None:
        return None


NO_SELECTION = NoSelection()


@dataclass(frozen=True)
class SelectionRange:
    """Selected text plus its 1-indexed inclusive line range."""

    text: str
    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("selection text must not be empty")
        if self.start_line < 1 or self.end_line < 1:
            raise ValueError(f"selection lines must be 1-indexed: {self.start_line}-{self.end_line}")
        if self.start_line > self.end_line:
            raise ValueError(f"selection start {self.start_line} is after end {self.end_line}")

    def to_payload(self) -> Dict[str, Any]:
        return {"text": self.text, "startLine": self.start_line, "endLine": self.end_line}


Selection = Union[NoSelection, SelectionRange]


@dataclass(frozen=True)
class FocusSnapshot:
    """The focused document path plus an optional selection."""

    path: str
    selection: Selection = NO_SELECTION

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("snapshot path must not be empty")

    @property
    def has_selection(self) -> bool:
        return isinstance(self.selection, SelectionRange)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"path": self.path}
        if isinstance(self.selection, SelectionRange):
            payload["selection"] = self.selection.to_payload()
        return payload


def _read_selection(selection: Optional[SelectionQuery], line_base: int) -> Selection:
    if selection is None:
        return NO_SELECTION
    try:
        text = selection.selected_text()
        if not text:
            return NO_SELECTION
        anchor, head = selection.selection_cursors()
        first = int(anchor.line) - line_base + 1
        second = int(head.line) - line_base + 1
    except Exception as exc:
        _LOGGER.debug("Selection query failed; treating as no selection: %s", exc)
        return NO_SELECTION
    start_line, end_line = (first, second) if first <= second else (second, first)
    if start_line < 1:
        _LOGGER.debug("Selection reported line %d before the first line; ignoring selection", start_line)
        return NO_SELECTION
    return SelectionRange(text=str(text), start_line=start_line, end_line=end_line)


def build_snapshot(
    document: Optional[FocusedDocument],
    selection: Optional[SelectionQuery],
    *,
    line_base: int = 0,
) -> Optional[FocusSnapshot]:
    """Capture the current focus state, or ``None`` when nothing is focused.

    ``line_base`` is the indexing base of the host's cursor lines; the
    snapshot always stores 1-indexed lines ordered so start <= end.
    """

    if document is None:
        return None
    try:
        path = document.path
    except Exception as exc:
        _LOGGER.debug("Focused document vanished during capture: %s", exc)
        return None
    if not path:
        return None
    return FocusSnapshot(path=str(path), selection=_read_selection(selection, line_base))
