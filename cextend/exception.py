"""Scoped catching of coded errors, with an abort path for uncaught ones."""

from __future__ import annotations

import threading
from types import TracebackType
from typing import Optional

from cextend.backtrace import print_stacktrace
from cextend.errors import CextendError, get_exception_str
from cextend.heap import free_ptr_list
from cextend.logger import LogType, logger

# Exit status of a process killed by SIGABRT.
ABORT_STATUS = 134

_local = threading.local()
_aborting = False
_should_free = False


def _stack() -> list["Try"]:
    stack = getattr(_local, "stack", None)
    if stack is None:
        stack = _local.stack = []
    return stack


def should_free_on_abort(enable: bool) -> bool:
    """Latch freeing of tracked objects on abort; return the current setting."""
    global _should_free
    if enable:
        _should_free = True
    return _should_free


def report_uncaught(code: int) -> None:
    """Report an uncaught error, free tracked objects if asked, and abort.

    Always raises :class:`SystemExit`. A throw made while aborting aborts
    at once, without a second report.
    """
    global _aborting
    if _aborting:
        raise SystemExit(ABORT_STATUS)
    _aborting = True
    try:
        logger(LogType.ERROR, "Uncaught exception: %s", get_exception_str(code))
        print_stacktrace()
        if should_free_on_abort(False):
            free_ptr_list()
    finally:
        _aborting = False
    raise SystemExit(ABORT_STATUS)


def catch_code(code: int, expected: int) -> bool:
    """Tell whether a handler for ``expected`` catches ``code``."""
    return CextendError(code).matches(expected)


def throw(code: int) -> None:
    """Raise an error with ``code`` to the innermost active :class:`Try`.

    With no active ``Try`` in this thread the error is uncaught and the
    program aborts.
    """
    if _aborting:
        raise SystemExit(ABORT_STATUS)
    if not _stack():
        report_uncaught(code)
    raise CextendError(code)


class Try:
    """A block that catches coded errors matching the registered codes.

    >>> with Try().catch(ExceptionType.BAD_ALLOC) as attempt:
    ...     throw(ExceptionType.BAD_ALLOC)
    >>> attempt.error.code
    23

    Errors that match no registered code go on to the enclosing ``Try``;
    when there is none, the program aborts.
    """

    def __init__(self) -> None:
        self._expected: list[int] = []
        self.error: Optional[CextendError] = None

    @property
    def caught(self) -> bool:
        return self.error is not None

    @property
    def code(self) -> Optional[int]:
        return None if self.error is None else self.error.code

    def catch(self, expected: int) -> "Try":
        """Also catch errors matching ``expected``; return this block."""
        self._expected.append(int(expected))
        return self

    def __enter__(self) -> "Try":
        self.error = None
        _stack().append(self)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        stack = _stack()
        if self in stack:
            del stack[len(stack) - 1 - stack[::-1].index(self)]
        if not isinstance(exc, CextendError):
            return False
        if any(exc.matches(expected) for expected in self._expected):
            self.error = exc
            return True
        if not stack:
            report_uncaught(exc.code)
        return False