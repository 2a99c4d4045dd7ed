import pytest

from cextend.backtrace import (
    STACKTRACE_SIZE,
    collect_frames,
    format_stacktrace,
    print_stacktrace,
)
from cextend.logger import init_logger


def _inner(skip):
    return collect_frames(skip)


def test_collect_frames_starts_with_caller():
    frames = collect_frames(0)
    assert frames[0].name == "test_collect_frames_starts_with_caller"


def test_collect_frames_skip_drops_innermost():
    frames = _inner(0)
    assert frames[0].name == "_inner"
    assert frames[1].name == "test_collect_frames_skip_drops_innermost"
    skipped = _inner(1)
    assert skipped[0].name == "test_collect_frames_skip_drops_innermost"


def test_collect_frames_is_bounded():
    assert len(collect_frames(0)) <= STACKTRACE_SIZE


def test_collect_frames_rejects_negative_skip():
    with pytest.raises(ValueError):
        collect_frames(-1)


def test_format_marks_first_frame_at_and_rest_by():
    frames = _inner(0)
    lines = format_stacktrace(frames)
    assert len(lines) == len(frames)
    assert lines[0].startswith("    at ")
    assert all(line.startswith("    by ") for line in lines[1:])
    assert "_inner" in lines[0]
    assert frames[0].filename in lines[0]


def test_format_empty():
    assert format_stacktrace([]) == []


def test_print_stacktrace_logs_errors(capsys):
    init_logger()
    print_stacktrace()
    err = capsys.readouterr().err
    lines = [line for line in err.splitlines() if line]
    assert lines
    assert all("[ERROR]:" in line for line in lines)
    assert "at" in lines[0] and "test_print_stacktrace_logs_errors" in lines[0]