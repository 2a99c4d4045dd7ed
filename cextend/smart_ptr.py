"""Reference-counted buffers tracked by the pointer registry."""

from __future__ import annotations

from typing import Callable, Optional

from cextend.errors import CextendError, ExceptionType
from cextend.heap import add_in_list, remove_from_list

Destructor = Callable[[bytearray], None]

SIZE_MAX = 2**64 - 1


def _free_smart_ptr(ptr: "SmartPtr") -> None:
    """Release the buffer of ``ptr``, running its destructor if it has one."""
    if not ptr._alive:
        return
    ptr._alive = False
    if ptr._dtor is not None:
        ptr._dtor(ptr.data)
    ptr.data = None


class SmartPtr:
    """A zero-initialised buffer with a use count and an optional destructor.

    The buffer is released when the count drops to zero, when it is destroyed
    explicitly, or when the registry is freed.
    """

    def __init__(self, size: int, dtor: Optional[Destructor] = None) -> None:
        if size < 0:
            raise CextendError(ExceptionType.BAD_ALLOC)
        try:
            self.data: Optional[bytearray] = bytearray(size)
        except (MemoryError, OverflowError):
            raise CextendError(ExceptionType.BAD_ALLOC) from None
        self._size = size
        self._use_count = 1
        self._dtor = dtor
        self._alive = True
        add_in_list(self, _free_smart_ptr)

    @property
    def size(self) -> int:
        return self._size

    @property
    def use_count(self) -> int:
        return self._use_count

    @property
    def alive(self) -> bool:
        return self._alive

    def _check_alive(self) -> None:
        if not self._alive:
            raise CextendError(ExceptionType.BAD_ALLOC)

    def retain(self) -> "SmartPtr":
        """Take one more reference and return this pointer."""
        self._check_alive()
        if self._use_count == SIZE_MAX:
            raise CextendError(ExceptionType.BAD_ALLOC)
        self._use_count += 1
        return self

    def release(self) -> None:
        """Drop one reference; the last one releases the buffer."""
        if not self._alive or self._use_count <= 0:
            return
        self._use_count -= 1
        if self._use_count == 0:
            self.destroy()

    def destroy(self) -> None:
        """Release the buffer now, whatever the use count."""
        remove_from_list(self)
        _free_smart_ptr(self)

    def dup(self) -> "SmartPtr":
        """Return a new pointer holding a copy of the buffer."""
        self._check_alive()
        copy = SmartPtr(self._size, self._dtor)
        copy.data[:] = self.data
        return copy

    def resize(self, size: int) -> None:
        """Grow (zero-filled) or shrink the buffer to ``size`` bytes."""
        self._check_alive()
        if size < 0:
            self.destroy()
            raise CextendError(ExceptionType.BAD_ALLOC)
        if size > self._size:
            try:
                self.data.extend(bytes(size - self._size))
            except (MemoryError, OverflowError):
                self.destroy()
                raise CextendError(ExceptionType.BAD_ALLOC) from None
        else:
            del self.data[size:]
        self._size = size


def create_smart_ptr(size: int, dtor: Optional[Destructor] = None) -> SmartPtr:
    """Create a tracked, zeroed buffer of ``size`` bytes with a use count of one."""
    return SmartPtr(size, dtor)