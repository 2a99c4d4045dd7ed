"""Start-up and shut-down of the library's shared state."""

from __future__ import annotations

import atexit

from cextend.exception import should_free_on_abort
from cextend.heap import free_ptr_list
from cextend.logger import init_logger

_exit_hook_registered = False


def initialize() -> None:
    """Enable the logger, free tracked objects on abort, and free them at exit."""
    global _exit_hook_registered
    init_logger()
    should_free_on_abort(True)
    if not _exit_hook_registered:
        atexit.register(shutdown)
        _exit_hook_registered = True


def shutdown() -> None:
    """Release every tracked object."""
    free_ptr_list()