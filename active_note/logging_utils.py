"""Plugin logger wiring that forwards records to the host's diagnostic channel."""
from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional

LOGGER_NAME = "ActiveNote"
LOG_TAG = "ActiveNote"
LOG_LEVEL_ENV = "ACTIVE_NOTE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.INFO

_LEVEL_NAME_MAP = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": logging.DEBUG,
}

_host_logger: Optional[logging.Logger] = None
_host_log: Optional[Callable[[str], None]] = None


def coerce_level(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        token = raw.strip().upper()
        if token.isdigit():
            return int(token)
        return _LEVEL_NAME_MAP.get(token)
    return None


def resolve_log_level() -> int:
    level = coerce_level(os.environ.get(LOG_LEVEL_ENV))
    if level is None or level == logging.NOTSET:
        return DEFAULT_LOG_LEVEL
    return level


def register_host_sink(host: object | None) -> None:
    """Remember where the host wants diagnostics; ``None`` clears it."""

    global _host_logger, _host_log
    logger_obj = getattr(host, "logger", None) if host is not None else None
    log_fn = getattr(host, "log", None) if host is not None else None
    _host_logger = logger_obj if isinstance(logger_obj, logging.Logger) else None
    _host_log = log_fn if callable(log_fn) else None


class _HostLogHandler(logging.Handler):
    """Logging bridge into the host editor's diagnostics."""

    def emit(self, record: logging.LogRecord) -> None:
        message = self.format(record)
        host_logger, host_log = _host_logger, _host_log
        if host_logger is not None:
            try:
                if host_logger.isEnabledFor(record.levelno):
                    host_logger.log(record.levelno, message)
                return
            except Exception:
                pass
        if host_log is not None:
            try:
                host_log(message)
                return
            except Exception:
                pass
        root_logger = logging.getLogger()
        if root_logger.isEnabledFor(record.levelno):
            root_logger.log(record.levelno, message)


def configure_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_log_level())
    if not any(getattr(handler, "_active_note_handler", False) for handler in logger.handlers):
        handler = _HostLogHandler()
        handler._active_note_handler = True  # type: ignore[attr-defined]
        formatter = logging.Formatter(f"[%(asctime)s] [{LOG_TAG}] %(message)s", "%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger
