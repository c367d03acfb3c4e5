from __future__ import annotations

from pathlib import Path

from active_note.pointer_file import write_pointer
from active_note.snapshot import FocusSnapshot, SelectionRange
from utils import pointer_cli


def test_describe_variants():
    assert pointer_cli.describe(None) == "<no active note>"
    assert pointer_cli.describe(FocusSnapshot("notes/today.md")) == "@. notes/today.md"
    assert (
        pointer_cli.describe(FocusSnapshot("a.md", SelectionRange("hello\nworld", 3, 5)))
        == "@. a.md (lines 3-5, 11 chars selected)"
    )
    assert pointer_cli.describe(FocusSnapshot("a.md", SelectionRange("w", 2, 2))) == "@. a.md (line 2, 1 chars selected)"


def test_main_prints_pointer(tmp_path: Path, capsys):
    target = tmp_path / "active-note.json"
    write_pointer(FocusSnapshot("a.md", SelectionRange("hello", 1, 1)), target)

    code = pointer_cli.main(["--pointer-path", str(target), "--text"])

    out = capsys.readouterr().out
    assert code == 0
    assert "@. a.md (line 1" in out
    assert out.rstrip().endswith("hello")


def test_main_reports_missing_pointer(tmp_path: Path, capsys):
    code = pointer_cli.main(["--pointer-path", str(tmp_path / "none.json")])
    assert code == 1
    assert "<no active note>" in capsys.readouterr().out


def test_default_path_honours_environment(monkeypatch, tmp_path: Path):
    monkeypatch.setenv(pointer_cli.POINTER_PATH_ENV, str(tmp_path / "env.json"))
    assert pointer_cli._default_pointer_path() == tmp_path / "env.json"
    monkeypatch.delenv(pointer_cli.POINTER_PATH_ENV)
    monkeypatch.chdir(tmp_path)
    assert pointer_cli._default_pointer_path() == tmp_path / ".active-note" / "active-note.json"


def test_watch_prints_only_changes(tmp_path: Path):
    target = tmp_path / "active-note.json"
    write_pointer(FocusSnapshot("a.md"), target)
    lines: list[str] = []
    polls = {"count": 0}

    def fake_sleep(_seconds: float) -> None:
        polls["count"] += 1
        if polls["count"] == 2:
            write_pointer(FocusSnapshot("b.md"), target)

    pointer_cli.watch(target, interval=0.01, emit=lines.append, sleep=fake_sleep, max_polls=4)

    assert lines == ["@. a.md", "@. b.md"]
