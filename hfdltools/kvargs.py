"""Parsing of comma-separated ``key=value`` option strings."""

from __future__ import annotations

from enum import IntEnum


class KVError(IntEnum):
    """Error codes reported while parsing a key-value string."""

    NO_ERROR = 0
    NO_INPUT = 1
    NO_KEY = 2
    NO_VALUE = 3


_ERROR_STRINGS = {
    KVError.NO_ERROR: "success",
    KVError.NO_INPUT: "no key-value string given",
    KVError.NO_KEY: "no key name given",
    KVError.NO_VALUE: "no value given",
}


def error_string(code: int) -> str:
    """Return a human-readable description of a key-value parsing error code."""
    try:
        return _ERROR_STRINGS[KVError(code)]
    except ValueError:
        return "unknown error"


class KVArgsError(ValueError):
    """Raised when a key-value string cannot be parsed."""

    def __init__(self, code: int, position: int = 0) -> None:
        self.code = KVError(code)
        self.position = position
        super().__init__(f"{error_string(code)} (at position {position})")


def parse_kvargs(string: str | None) -> dict[str, str]:
    """Parse ``key1=val1,key2=val2,...`` into a dictionary.

    Values may be empty and may contain ``=``; keys may not be empty.
    A later occurrence of a key replaces an earlier one.
    """
    if string is None:
        raise KVArgsError(KVError.NO_INPUT, 0)

    result: dict[str, str] = {}
    offset = 0
    for pair in string.split(","):
        key, sep, value = pair.partition("=")
        if key == "":
            raise KVArgsError(KVError.NO_KEY, offset)
        if not sep:
            raise KVArgsError(KVError.NO_VALUE, offset + len(key))
        result[key] = value
        offset += len(pair) + 1
    return result