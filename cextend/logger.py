"""Coloured, thread-safe logging to the standard streams."""

from __future__ import annotations

import sys
import threading
from enum import IntEnum
from typing import TextIO

CRED = "\x1b[31m"
CRESET = "\x1b[0m"
CYELLOW = "\x1b[33m"
CPURPLE = "\x1b[35m"

ANSI_FMT_EXTRA = 15
MAX_FORMAT_SIZE = 2048


class LogType(IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2


# label, colour, goes to the error stream
_TYPE_INFOS = {
    LogType.INFO: ("INFO", CYELLOW, False),
    LogType.WARNING: ("WARNING", CPURPLE, True),
    LogType.ERROR: ("ERROR", CRED, True),
}


class Logger:
    """Writes printf-style messages prefixed with a coloured type label.

    Streams left as ``None`` resolve to ``sys.stdout`` / ``sys.stderr`` at
    write time.
    """

    def __init__(
        self, info_stream: TextIO | None = None, error_stream: TextIO | None = None
    ) -> None:
        self._info_stream = info_stream
        self._error_stream = error_stream
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        self._initialized = True

    def _stream(self, to_error: bool) -> TextIO:
        if to_error:
            return sys.stderr if self._error_stream is None else self._error_stream
        return sys.stdout if self._info_stream is None else self._info_stream

    def _report(self, message: str) -> None:
        stream = self._stream(True)
        stream.write(f"{CRED}[ERROR]: {message}{CRESET}\n")
        stream.flush()

    def format(self, log_type: int, fmt: str) -> str | None:
        """Build the full format string, or report the problem and return None."""
        infos = _TYPE_INFOS.get(log_type)
        type_len = len(infos[0]) if infos else 0
        if not self._initialized:
            self._report("Logger is not initialized.")
            return None
        if len(fmt) + type_len + ANSI_FMT_EXTRA >= MAX_FORMAT_SIZE:
            self._report("Logger format is too big.")
            return None
        if infos is None:
            self._report("Unknown logger type.")
            return None
        label, color, _ = infos
        return f"{color}[{label}]: {fmt}{CRESET}\n"

    def log(self, log_type: int, fmt: str, *args: object) -> int:
        """Write one message; return the number of characters written."""
        template = self.format(log_type, fmt)
        if template is None:
            return 0
        text = template % args
        stream = self._stream(_TYPE_INFOS[log_type][2])
        with self._lock:
            stream.write(text)
            stream.flush()
        return len(text)


_default_logger = Logger()
_debug = False
_suppressed_lock = threading.Lock()
_suppressed_messages = 0


def init_logger() -> None:
    _default_logger.init()


def logger(log_type: int, fmt: str, *args: object) -> int:
    return _default_logger.log(log_type, fmt, *args)


def logger_off(log_type: int, fmt: str, *args: object) -> int:
    """Discard a message without writing it; always returns 0."""
    global _suppressed_messages
    with _suppressed_lock:
        _suppressed_messages += 1
    return 0


def set_debug(enabled: bool) -> None:
    """Switch the debug-only :func:`log` on or off."""
    global _debug
    _debug = bool(enabled)


def log(log_type: int, fmt: str, *args: object) -> int:
    """Log only when debugging is enabled."""
    if _debug:
        return logger(log_type, fmt, *args)
    return logger_off(log_type, fmt, *args)