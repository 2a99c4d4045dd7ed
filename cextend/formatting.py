"""printf-style formatting into freshly built strings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from cextend.errors import CextendError, ExceptionType


def vsnprintf_alloc(fmt: str, args: Iterable[Any] | Mapping[str, Any]) -> str:
    """Format ``fmt`` with a sequence or mapping of arguments.

    Raises :class:`CextendError` with ``LENGTH_ERROR`` when the arguments do
    not fit the format.
    """
    values = args if isinstance(args, Mapping) else tuple(args)
    try:
        return fmt % values
    except (TypeError, ValueError, KeyError):
        raise CextendError(ExceptionType.LENGTH_ERROR) from None


def snprintf_alloc(fmt: str, *args: Any) -> str:
    """Format ``fmt`` with positional arguments."""
    return vsnprintf_alloc(fmt, args)