from cextend.exception import should_free_on_abort
from cextend.heap import add_in_list, safe_free, safe_malloc
from cextend.logger import LogType, logger
from cextend.runtime import initialize, shutdown


def test_initialize_enables_logger(capsys):
    initialize()
    written = logger(LogType.INFO, "hello %s", "world")
    out = capsys.readouterr().out
    assert "[INFO]: hello world" in out
    assert written == len(out)


def test_initialize_enables_free_on_abort():
    initialize()
    assert should_free_on_abort(False) is True


def test_initialize_twice_keeps_working(capsys):
    initialize()
    initialize()
    logger(LogType.WARNING, "again")
    assert "[WARNING]: again" in capsys.readouterr().err


def test_shutdown_runs_destructors_once():
    freed = []
    buffer = safe_malloc(4, freed.append)
    obj = object()
    add_in_list(obj, freed.append)
    shutdown()
    assert freed == [buffer, obj]
    safe_free(buffer)
    safe_free(obj)
    assert freed == [buffer, obj]


def test_shutdown_on_empty_registry():
    shutdown()
    freed = []
    add_in_list("item", freed.append)
    shutdown()
    shutdown()
    assert freed == ["item"]