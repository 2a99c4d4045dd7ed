"""A registry of allocated buffers released together at exit."""

from __future__ import annotations

from typing import Any, Callable, Optional

from cextend.errors import CextendError, ExceptionType

Destructor = Callable[[Any], None]


class PointerRegistry:
    """Keeps objects with optional destructors in allocation order.

    Objects are matched by identity.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[Any, Optional[Destructor]]] = []

    def add(self, obj: Any, dtor: Optional[Destructor] = None) -> None:
        if obj is None:
            return
        self._entries.append((obj, dtor))

    def _pop(self, obj: Any) -> Optional[tuple[Any, Optional[Destructor]]]:
        for index, entry in enumerate(self._entries):
            if entry[0] is obj:
                return self._entries.pop(index)
        return None

    def remove(self, obj: Any) -> None:
        """Drop the first entry for ``obj`` and run its destructor."""
        if obj is None:
            return
        entry = self._pop(obj)
        if entry is not None and entry[1] is not None:
            entry[1](obj)

    def _forget(self, obj: Any) -> None:
        self._pop(obj)

    def free_all(self) -> None:
        """Run every destructor in allocation order and empty the registry."""
        entries, self._entries = self._entries, []
        for obj, dtor in entries:
            if dtor is not None:
                dtor(obj)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, obj: object) -> bool:
        return any(entry[0] is obj for entry in self._entries)


_registry = PointerRegistry()


def add_in_list(obj: Any, dtor: Optional[Destructor] = None) -> None:
    _registry.add(obj, dtor)


def remove_from_list(obj: Any) -> None:
    _registry.remove(obj)


def free_ptr_list() -> None:
    _registry.free_all()


def _allocate(size: int) -> bytearray:
    if size < 0:
        raise CextendError(ExceptionType.BAD_ALLOC)
    try:
        return bytearray(size)
    except (MemoryError, OverflowError):
        raise CextendError(ExceptionType.BAD_ALLOC) from None


def _register(obj: Any, dtor: Optional[Destructor]) -> Any:
    _registry.add(obj, dtor)
    return obj


def safe_malloc(size: int, dtor: Optional[Destructor] = None) -> bytearray:
    """Allocate a tracked buffer of ``size`` bytes."""
    return _register(_allocate(size), dtor)


def safe_valloc(size: int, dtor: Optional[Destructor] = None) -> bytearray:
    return _register(_allocate(size), dtor)


def safe_calloc(count: int, size: int, dtor: Optional[Destructor] = None) -> bytearray:
    """Allocate a tracked zeroed buffer of ``count`` elements of ``size`` bytes."""
    if count < 0 or size < 0:
        raise CextendError(ExceptionType.BAD_ALLOC)
    return _register(_allocate(count * size), dtor)


def safe_aligned_alloc(
    alignment: int, size: int, dtor: Optional[Destructor] = None
) -> bytearray:
    """Allocate a tracked buffer; ``alignment`` must be a power of two."""
    if alignment <= 0 or alignment & (alignment - 1):
        raise CextendError(ExceptionType.BAD_ALLOC)
    return _register(_allocate(size), dtor)


def safe_realloc(
    buffer: Optional[bytes], size: int, dtor: Optional[Destructor] = None
) -> bytearray:
    """Return a tracked buffer of ``size`` bytes holding the start of ``buffer``.

    The old buffer is consumed: it leaves the registry without its destructor
    being run.
    """
    new = _allocate(size)
    if buffer is not None:
        data = bytes(buffer[:size])
        new[: len(data)] = data
        _registry._forget(buffer)
    return _register(new, dtor)


def safe_strdup(text: str) -> str:
    """Return a tracked copy of ``text``."""
    if not isinstance(text, str):
        raise TypeError("safe_strdup expects a str")
    return _register(str(text), None)


def safe_free(obj: Any) -> None:
    """Release a tracked object now, running its destructor."""
    _registry.remove(obj)