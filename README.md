# cextend

A small library of runtime helpers. It provides coded errors with scoped
catching, a coloured logger, a registry of tracked resources,
reference-counted buffers, printf-style formatting and symbol lookup in ELF
files.

## Modules

### `cextend.errors`

- `ExceptionType` is an `IntEnum` of error codes. Its families are
  `LOGIC_ERROR` … `LOGIC_ERROR_MAX`, `RUNTIME_ERROR` … `RUNTIME_ERROR_MAX`
  and `BAD_ALLOC` … `BAD_ALLOC_MAX`. `EXCEPTION` … `MAX` spans all of them.
- `CextendError(code)` is an exception that carries `code` and a
  `description`.
- `CextendError.matches(expected)` is true in two cases: the codes are equal,
  or `expected` is the base code of a family that contains the error's code.
- `get_exception_str(code)` returns the name of a code, such as
  `"out_of_range"`. A code outside the known range gives `"bad_exception"`.

### `cextend.exception`

- `Try()` is a context manager. `Try.catch(expected)` registers a code to
  catch and returns the block, so the calls can be chained. A `CextendError`
  raised inside the block is handled as follows:
  - If it matches a registered code, it is stored in `attempt.error` and
    suppressed. `attempt.caught` and `attempt.code` report what was caught.
  - If it matches no registered code, it passes to the enclosing `Try`.
  - If there is no enclosing `Try`, it is treated as uncaught.
- `throw(code)` raises `CextendError(code)` to the innermost active `Try` of
  the current thread. When no `Try` is active, the error is uncaught.
- `catch_code(code, expected)` applies the same matching rule as
  `CextendError.matches`.
- `report_uncaught(code)` handles an uncaught error:
  1. It logs `Uncaught exception: <name>`.
  2. It prints the stack trace.
  3. It frees every tracked object, but only if freeing on abort has been
     enabled.
  4. It raises `SystemExit(134)`.
- `should_free_on_abort(enable)` turns on freeing of tracked objects at abort.
  Once turned on, the setting stays on. The function returns the current
  setting.

### `cextend.logger`

- `Logger(info_stream=None, error_stream=None)` writes lines of the form
  `[INFO]: …`, `[WARNING]: …` and `[ERROR]: …` in ANSI colours.
  - Info lines go to the info stream, which defaults to `sys.stdout`.
    Warnings and errors go to the error stream, which defaults to
    `sys.stderr`.
  - Writes are serialised by a lock.
  - `Logger.init()` must be called before anything is written.
  - `Logger.log(log_type, fmt, *args)` formats the message with `%` and
    returns the number of characters written.
  - If the logger is not initialised, the format is too long, or the type is
    unknown, `log` writes an `[ERROR]` line about the problem to the error
    stream and returns 0.
  - `Logger.format(log_type, fmt)` returns the coloured template, or `None`
    when there is such a problem.
- `LogType` has three members: `INFO`, `WARNING` and `ERROR`.
- The module-level functions use one shared logger:
  - `init_logger()` initialises it.
  - `logger(...)` always writes.
  - `log(...)` writes only after `set_debug(True)`. Otherwise it calls
    `logger_off`.
  - `logger_off(...)` discards the message and returns 0.

### `cextend.heap`

- `PointerRegistry` keeps objects, each with an optional destructor, in the
  order they were added. Objects are matched by identity.
  - `add(obj, dtor)` adds an entry. It ignores `None`.
  - `remove(obj)` drops the first entry for `obj` and runs its destructor.
  - `free_all()` runs every destructor in allocation order and then empties
    the registry.
  - `len()` and `in` are also supported.
- A shared registry is driven by `add_in_list`, `remove_from_list` and
  `free_ptr_list`.
- The allocation helpers all return `bytearray` buffers, except
  `safe_strdup`. Each helper registers its result in the shared registry.
  - `safe_malloc(size, dtor)` and `safe_valloc(size, dtor)` allocate `size`
    bytes.
  - `safe_calloc(count, size, dtor)` allocates `count * size` bytes.
  - `safe_aligned_alloc(alignment, size, dtor)` allocates `size` bytes.
    `alignment` must be a power of two.
  - `safe_realloc(buffer, size, dtor)` returns a new buffer that holds the
    start of the old one. The old buffer is removed from the registry without
    running its destructor.
  - `safe_strdup(text)` registers a copy of a string.
- Invalid sizes, and failed allocations, raise `CextendError(BAD_ALLOC)`.
- `safe_free(obj)` releases a tracked object immediately.

### `cextend.smart_ptr`

- `create_smart_ptr(size, dtor=None)` returns a `SmartPtr`. It holds a zeroed
  `bytearray` in `data`, has a use count of one, and is registered in the
  shared registry.
- The `SmartPtr` methods are:
  - `retain()` adds a reference.
  - `release()` drops a reference. The last release frees the buffer and runs
    the destructor.
  - `destroy()` frees the buffer immediately.
  - `dup()` returns an independent copy.
  - `resize(size)` grows the buffer, zero-filling the new bytes, or shrinks
    it.
- Using a pointer that has already been freed raises
  `CextendError(BAD_ALLOC)`.

### `cextend.formatting`

- `snprintf_alloc(fmt, *args)` returns a new string formatted with `%`.
- `vsnprintf_alloc(fmt, args)` does the same, taking a sequence or a mapping
  of arguments.
- Arguments that do not fit the format raise `CextendError(LENGTH_ERROR)`.

### `cextend.elf_symbols`

- `parse_elf_symbols(data)` reads the function symbols (`"T"`) and object
  symbols (`"D"`) of a 32- or 64-bit ELF image.
  - It uses `.symtab`/`.strtab` and falls back to `.dynsym`/`.dynstr`.
  - Data that is not a readable ELF image gives an empty list.
- `parse_maps_line(line)` splits a `/proc/<pid>/maps` line into
  `(start, end, offset, path)`.
- `find_mapping(fname, address, maps_path)` finds the mapping of `fname`
  that contains `address`. `maps_path` defaults to `/proc/self/maps`.
- `SymbolCache` reads the symbol tables of files and caches them.
  - `build(fname)` loads the symbols of a file.
  - `lookup(address, fname, maps_path)` resolves an address to the closest
    symbol at or below it.
  - `do_nm(address, fname)` builds the table if needed and then looks the
    address up. It returns `"???"` when nothing is found.
- `SymbolFile.best_symbol(address)` picks the closest symbol at or below an
  address.
- The module-level `do_nm` uses a shared cache.

### `cextend.backtrace`

- `collect_frames(skip=0)` returns the caller's Python stack, innermost frame
  first, with at most 256 frames.
- `format_stacktrace(frames)` turns the frames into lines of the form
  `    at <line>: <function> (<file>)`. The lines after the first begin with
  `by` instead of `at`.
- `print_stacktrace()` logs these lines as errors.

### `cextend.runtime`

- `initialize()` does three things:
  - It initialises the shared logger.
  - It enables freeing of tracked objects on abort.
  - It registers `shutdown` to run at interpreter exit.
- `shutdown()` frees every tracked object.

## Install

```
pip install .
```

## Example

```python
from cextend.errors import ExceptionType
from cextend.exception import Try, throw
from cextend.logger import LogType, logger
from cextend.runtime import initialize, shutdown

initialize()

with Try().catch(ExceptionType.LOGIC_ERROR) as attempt:
    throw(ExceptionType.OUT_OF_RANGE)

if attempt.caught:
    logger(LogType.WARNING, "caught %s, using default", attempt.error.description)

shutdown()
```

## Limitations

- The package is a library only. It provides no command-line tool.
- Stack traces show Python frames, not machine addresses.
- ELF symbol lookup is limited:
  - Resolving a runtime address needs a memory-map file such as
    `/proc/self/maps`. Where no such file exists, `do_nm` returns `"???"`.
  - Only the symbol tables of ELF files are read. Other executable formats
    are not understood.

## Tests

```
pip install .[test]
pytest
```