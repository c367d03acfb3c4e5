#!/usr/bin/env python3
"""Print the editor focus state recorded in the Active Note pointer file."""
from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from active_note.pointer_file import load_pointer
from active_note.preferences import default_pointer_path
from active_note.snapshot import FocusSnapshot, SelectionRange

POINTER_PATH_ENV = "ACTIVE_NOTE_POINTER_PATH"
DEFAULT_CONFIG_DIR = ".active-note"


def _default_pointer_path() -> Path:
    env = os.environ.get(POINTER_PATH_ENV)
    if env:
        return Path(env).expanduser()
    return Path.cwd() / default_pointer_path(DEFAULT_CONFIG_DIR)


def describe(snapshot: Optional[FocusSnapshot]) -> str:
    if snapshot is None:
        return "<no active note>"
    selection = snapshot.selection
    if not isinstance(selection, SelectionRange):
        return f"@. {snapshot.path}"
    if selection.start_line == selection.end_line:
        where = f"line {selection.start_line}"
    else:
        where = f"lines {selection.start_line}-{selection.end_line}"
    return f"@. {snapshot.path} ({where}, {len(selection.text)} chars selected)"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show the note and selection the editor last reported")
    parser.add_argument("--pointer-path", type=Path, default=_default_pointer_path(), help="Path to active-note.json")
    parser.add_argument("--watch", action="store_true", help="Keep polling and print whenever the pointer changes")
    parser.add_argument("--interval", type=float, default=0.5, help="Polling interval in seconds for --watch")
    parser.add_argument("--text", action="store_true", help="Also print the selected text")
    return parser.parse_args(argv)


def _render(snapshot: Optional[FocusSnapshot], include_text: bool) -> str:
    line = describe(snapshot)
    if include_text and snapshot is not None and isinstance(snapshot.selection, SelectionRange):
        line = f"{line}\n{snapshot.selection.text}"
    return line


def watch(
    path: Path,
    *,
    interval: float,
    include_text: bool = False,
    emit: Callable[[str], None] = print,
    sleep: Callable[[float], None] = time.sleep,
    max_polls: Optional[int] = None,
) -> None:
    last: object = object()
    polls = 0
    while max_polls is None or polls < max_polls:
        snapshot = load_pointer(path)
        if snapshot != last:
            emit(_render(snapshot, include_text))
            last = snapshot
        polls += 1
        sleep(max(0.05, interval))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    pointer_path = args.pointer_path.expanduser()

    if args.watch:
        try:
            watch(pointer_path, interval=args.interval, include_text=args.text)
        except KeyboardInterrupt:
            return 0
        return 0

    snapshot = load_pointer(pointer_path)
    print(_render(snapshot, args.text))
    return 0 if snapshot is not None else 1


if __name__ == "__main__":
    raise SystemExit(main())
