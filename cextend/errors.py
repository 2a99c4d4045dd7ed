"""Exception codes and the error type raised throughout the package."""

from __future__ import annotations

from enum import IntEnum


class ExceptionType(IntEnum):
    """Error codes, grouped in families that each end with a ``*_MAX`` marker."""

    EXCEPTION = 0

    LOGIC_ERROR = 1
    INVALID_ARGUMENT = 2
    DOMAIN_ERROR = 3
    LENGTH_ERROR = 4
    OUT_OF_RANGE = 5
    FUTURE_ERROR = 6
    LOGIC_ERROR_MAX = 7

    RUNTIME_ERROR = 8
    RANGE_ERROR = 9
    OVERFLOW_ERROR = 10
    UNDERFLOW_ERROR = 11
    REGEX_ERROR = 12
    SYSTEM_ERROR = 13
    TX_EXCEPTION = 14
    NONEXISTENT_LOCAL_TIME = 15
    AMBIGUOUS_LOCAL_TIME = 16
    FORMAT_ERROR = 17
    RUNTIME_ERROR_MAX = 18

    BAD_TYPE = 19
    BAD_TYPEID = 20
    BAD_CAST = 21

    BAD_FUNCTION_CALL = 22

    BAD_ALLOC = 23
    BAD_ARRAY_NEW_LENGTH = 24
    BAD_ALLOC_MAX = 25

    BAD_EXCEPTION = 26

    MAX = 27


_DESCRIPTIONS = (
    "exception",
    "logic_error",
    "invalid_argument",
    "domain_error",
    "length_error",
    "out_of_range",
    "future_error",
    "logic_error_max",
    "runtime_error",
    "range_error",
    "overflow_error",
    "underflow_error",
    "regex_error",
    "system_error",
    "tx_exception",
    "nonexistent_local_time",
    "ambiguous_local_time",
    "format_error",
    "runtime_error_max",
    "bad_type",
    "bad_typeid",
    "bad_cast",
    "bad_function_call",
    "bad_alloc",
    "bad_array_new_length",
    "bad_alloc_max",
    "bad_exception",
    "exception_max",
)

# A base code catches every code in its inclusive range.
_FAMILIES = (
    (ExceptionType.EXCEPTION, ExceptionType.MAX),
    (ExceptionType.LOGIC_ERROR, ExceptionType.LOGIC_ERROR_MAX),
    (ExceptionType.RUNTIME_ERROR, ExceptionType.RUNTIME_ERROR_MAX),
    (ExceptionType.BAD_ALLOC, ExceptionType.BAD_ALLOC_MAX),
)


def get_exception_str(code: int) -> str:
    """Return the name of an error code; unknown codes read as ``bad_exception``."""
    code = int(code)
    if code < ExceptionType.EXCEPTION or code > ExceptionType.MAX:
        return _DESCRIPTIONS[ExceptionType.BAD_EXCEPTION]
    return _DESCRIPTIONS[code]


class CextendError(Exception):
    """An error carrying one of the :class:`ExceptionType` codes."""

    def __init__(self, code: int) -> None:
        self.code = int(code)
        super().__init__(get_exception_str(self.code))

    @property
    def description(self) -> str:
        return get_exception_str(self.code)

    def matches(self, expected: int) -> bool:
        """Tell whether a handler for ``expected`` catches this error."""
        expected = int(expected)
        for low, high in _FAMILIES:
            if expected == low and low <= self.code <= high:
                return True
        return self.code == expected