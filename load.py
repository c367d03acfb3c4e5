"""Primary entry point for the Active Note plugin."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

if __package__:
    from .version import __version__ as ACTIVE_NOTE_VERSION
    from .active_note.logging_utils import LOGGER_NAME, configure_logger, register_host_sink
    from .active_note.pipeline import FocusPipeline
    from .active_note.preferences import Preferences
else:  # pragma: no cover - host loads as top-level module
    from version import __version__ as ACTIVE_NOTE_VERSION
    from active_note.logging_utils import LOGGER_NAME, configure_logger, register_host_sink
    from active_note.pipeline import FocusPipeline
    from active_note.preferences import Preferences

PLUGIN_NAME = "ActiveNote"
PLUGIN_VERSION = ACTIVE_NOTE_VERSION

LOGGER = configure_logger()


def _log(message: str) -> None:
    """Log to the host via the Python logging facade."""
    LOGGER.info(message)


# Host hook functions ------------------------------------------------------

_plugin: Optional[FocusPipeline] = None
_preferences: Optional[Preferences] = None


def plugin_start(host: Any, plugin_dir: str) -> str:
    global _plugin, _preferences
    if _plugin is not None and _plugin.running:
        LOGGER.debug("plugin_start called while already running; ignoring")
        return PLUGIN_NAME
    register_host_sink(host)
    _log(f"Initialising Active Note plugin from {plugin_dir}")
    _preferences = Preferences(Path(plugin_dir))
    _plugin = FocusPipeline(host, _preferences)
    _plugin.start()
    LOGGER.debug("Pointer file target: %s", _plugin.pointer_path())
    return PLUGIN_NAME


def plugin_stop() -> None:
    global _plugin, _preferences
    if _plugin:
        try:
            _plugin.stop()
        finally:
            _plugin = None
    _preferences = None
    register_host_sink(None)


def plugin_prefs_save() -> None:
    LOGGER.debug("plugin_prefs_save invoked")
    if _preferences is None:
        LOGGER.debug("Preferences not initialised; nothing to save")
        return
    try:
        _preferences.save()
        LOGGER.debug(
            "Preferences saved: pointer_file_path=%r debounce_ms=%d",
            _preferences.pointer_file_path,
            _preferences.debounce_ms,
        )
        if _plugin:
            _plugin.on_preferences_updated()
    except Exception as exc:
        LOGGER.exception("Failed to save preferences: %s", exc)


def current_pipeline() -> Optional[FocusPipeline]:
    return _plugin


# Metadata expected by some plugin loaders
name = PLUGIN_NAME
version = PLUGIN_VERSION
plugin_name = PLUGIN_NAME
logger_name = LOGGER_NAME


if __name__ == "__main__":  # pragma: no cover - developer harness
    import argparse
    import sys

    from PyQt6.QtWidgets import QApplication, QPlainTextEdit, QTabWidget

    if __package__:
        from .active_note.qt_host import DOCUMENT_PATH_PROPERTY, QtEditorHost
    else:
        from active_note.qt_host import DOCUMENT_PATH_PROPERTY, QtEditorHost

    parser = argparse.ArgumentParser(description="Run the Active Note plugin inside a throwaway Qt editor")
    parser.add_argument("--storage-root", type=Path, default=Path.cwd(), help="Directory the pointer path is resolved against")
    parser.add_argument("--plugin-dir", type=Path, default=Path(__file__).resolve().parent, help="Directory holding the settings file")
    parser.add_argument("documents", nargs="*", type=Path, help="Text files to open as tabs")
    args = parser.parse_args()

    app = QApplication(sys.argv[:1])
    harness_host = QtEditorHost(app, args.storage_root.resolve())
    harness_host.install()
    (harness_host.storage_root() / harness_host.config_dir).mkdir(parents=True, exist_ok=True)
    tabs = QTabWidget()
    for document in args.documents or [Path("scratch.md")]:
        editor = QPlainTextEdit()
        editor.setProperty(DOCUMENT_PATH_PROPERTY, document.as_posix())
        try:
            editor.setPlainText(document.read_text(encoding="utf-8"))
        except OSError:
            pass
        tabs.addTab(editor, document.name)
    tabs.resize(800, 600)
    tabs.show()
    plugin_start(harness_host, str(args.plugin_dir))
    try:
        exit_code = app.exec()
    finally:
        plugin_stop()
        harness_host.uninstall()
    raise SystemExit(exit_code)
