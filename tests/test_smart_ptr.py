import pytest

from cextend.errors import CextendError, ExceptionType
from cextend.heap import free_ptr_list
from cextend.smart_ptr import SmartPtr, create_smart_ptr


@pytest.fixture(autouse=True)
def clean_registry():
    free_ptr_list()
    yield
    free_ptr_list()


def test_create_is_zeroed_with_one_reference():
    ptr = create_smart_ptr(8)
    assert ptr.size == 8
    assert ptr.data == bytearray(8)
    assert ptr.use_count == 1
    assert ptr.alive


def test_create_negative_size_raises():
    with pytest.raises(CextendError) as info:
        create_smart_ptr(-1)
    assert info.value.code == ExceptionType.BAD_ALLOC


def test_retain_increments_and_returns_self():
    ptr = create_smart_ptr(4)
    assert ptr.retain() is ptr
    assert ptr.use_count == 2


def test_release_last_reference_runs_destructor():
    freed = []
    ptr = create_smart_ptr(3, freed.append)
    ptr.data[:] = b"abc"
    ptr.retain()
    ptr.release()
    assert freed == []
    assert ptr.use_count == 1
    ptr.release()
    assert freed == [bytearray(b"abc")]
    assert not ptr.alive
    assert ptr.data is None


def test_release_after_destroy_is_noop():
    freed = []
    ptr = create_smart_ptr(2, freed.append)
    ptr.destroy()
    ptr.release()
    assert len(freed) == 1


def test_destroy_runs_destructor_once_and_blocks_retain():
    freed = []
    ptr = create_smart_ptr(2, freed.append)
    ptr.destroy()
    ptr.destroy()
    free_ptr_list()
    assert len(freed) == 1
    with pytest.raises(CextendError) as info:
        ptr.retain()
    assert info.value.code == ExceptionType.BAD_ALLOC


def test_dup_copies_contents_independently():
    freed = []
    ptr = create_smart_ptr(4, freed.append)
    ptr.data[:] = b"wxyz"
    ptr.retain()
    copy = ptr.dup()
    assert copy is not ptr
    assert copy.data == ptr.data
    assert copy.use_count == 1
    copy.data[0] = 0
    assert ptr.data == bytearray(b"wxyz")
    copy.destroy()
    assert freed == [bytearray(b"\x00xyz")]


def test_dup_of_destroyed_raises():
    ptr = create_smart_ptr(1)
    ptr.destroy()
    with pytest.raises(CextendError):
        ptr.dup()


def test_resize_grow_zero_fills():
    ptr = create_smart_ptr(2)
    ptr.data[:] = b"hi"
    ptr.resize(5)
    assert ptr.size == 5
    assert ptr.data == bytearray(b"hi\x00\x00\x00")


def test_resize_shrink_truncates():
    ptr = create_smart_ptr(4)
    ptr.data[:] = b"abcd"
    ptr.resize(2)
    assert ptr.size == 2
    assert ptr.data == bytearray(b"ab")


def test_resize_negative_destroys_and_raises():
    freed = []
    ptr = create_smart_ptr(2, freed.append)
    with pytest.raises(CextendError) as info:
        ptr.resize(-3)
    assert info.value.code == ExceptionType.BAD_ALLOC
    assert not ptr.alive
    assert len(freed) == 1


def test_free_ptr_list_releases_live_pointers():
    freed = []
    first = create_smart_ptr(1, freed.append)
    second = SmartPtr(2, freed.append)
    free_ptr_list()
    assert len(freed) == 2
    assert not first.alive
    assert not second.alive