"""Printing the call stack when an error cannot be handled."""

from __future__ import annotations

import traceback
from collections.abc import Sequence

from cextend.logger import LogType, logger

STACKTRACE_SIZE = 256


def collect_frames(skip: int = 0) -> list[traceback.FrameSummary]:
    """Frames of the caller's stack, innermost first.

    The caller's own frame comes first; ``skip`` drops that many more
    innermost frames. At most ``STACKTRACE_SIZE`` frames are returned.
    """
    if skip < 0:
        raise ValueError("skip must not be negative")
    stack = traceback.extract_stack()[:-1]
    stack.reverse()
    return stack[skip : skip + STACKTRACE_SIZE]


def format_stacktrace(frames: Sequence[traceback.FrameSummary]) -> list[str]:
    """One line per frame: the first marked ``at``, the others ``by``."""
    lines = []
    for position, frame in enumerate(frames):
        word = "at" if position == 0 else "by"
        name = frame.name or "???"
        filename = frame.filename or "???"
        lines.append(f"    {word} {frame.lineno}: {name} ({filename})")
    return lines


def print_stacktrace() -> None:
    """Log the caller's stack as errors, innermost frame first."""
    for line in format_stacktrace(collect_frames(1)):
        logger(LogType.ERROR, "%s", line)