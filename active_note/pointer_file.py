"""Pointer file encoding, atomic writes, and a lightweight reader."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .snapshot import NO_SELECTION, FocusSnapshot, SelectionRange

TMP_SUFFIX = ".tmp"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a pointer write."""

    ok: bool
    path: Path
    error: Optional[str] = None


def encode_snapshot(snapshot: FocusSnapshot) -> str:
    """Return the canonical compact JSON text for ``snapshot``."""

    return json.dumps(snapshot.to_payload(), separators=(",", ":"), ensure_ascii=False)


def resolve_pointer_path(storage_root: Union[str, Path], relative: str) -> Path:
    """Join the configured relative pointer path under the storage root."""

    cleaned = (relative or "").strip().lstrip("/\\")
    return Path(storage_root) / cleaned


def write_pointer(snapshot: FocusSnapshot, target: Path) -> WriteResult:
    """Replace ``target`` with the encoded snapshot via a temp file and rename.

    Missing parent directories are not created. Errors come back as a failed
    :class:`WriteResult` rather than an exception.
    """

    target = Path(target)
    tmp_path = target.with_name(target.name + TMP_SUFFIX)
    try:
        tmp_path.write_text(encode_snapshot(snapshot), encoding="utf-8")
        tmp_path.replace(target)
    except (OSError, ValueError) as exc:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            pass
        return WriteResult(ok=False, path=target, error=f"{type(exc).__name__}: {exc}")
    return WriteResult(ok=True, path=target)


def _snapshot_from_payload(raw: Mapping[str, Any]) -> Optional[FocusSnapshot]:
    path = raw.get("path")
    if not isinstance(path, str) or not path:
        return None
    selection = raw.get("selection")
    if not isinstance(selection, dict):
        return FocusSnapshot(path=path, selection=NO_SELECTION)
    text = selection.get("text")
    start = selection.get("startLine")
    end = selection.get("endLine")
    if not isinstance(text, str) or not isinstance(start, int) or not isinstance(end, int):
        return FocusSnapshot(path=path, selection=NO_SELECTION)
    try:
        return FocusSnapshot(path=path, selection=SelectionRange(text, min(start, end), max(start, end)))
    except ValueError:
        return FocusSnapshot(path=path, selection=NO_SELECTION)


def load_pointer(path: Path) -> Optional[FocusSnapshot]:
    """Reader used by tools that consume the pointer file.

    Understands both the JSON object format and the older plain-text format
    that held only the document path.
    """

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    stripped = text.strip()
    if not stripped:
        return None
    if stripped.startswith("{"):
        try:
            raw = json.loads(stripped)
        except json.JSONDecodeError:
            return None
        if not isinstance(raw, dict):
            return None
        return _snapshot_from_payload(raw)
    if "\n" in stripped:
        return None
    return FocusSnapshot(path=stripped)
