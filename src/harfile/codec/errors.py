"""Errors raised (or recorded) by the HAR codec.

Every error carries the path of the offending value, e.g.
``log.entries[3].request.headersSize``.
"""

from __future__ import annotations


class HarCodecError(ValueError):
    """Base class for HAR decode/encode errors."""

    def __init__(self, message: str, path: str = "") -> None:
        self.message = message
        self.path = path
        full_message = message
        if path:
            full_message += f" (at {path})"
        super().__init__(full_message)


class MalformedInputError(HarCodecError):
    """Raised when the document is not JSON or a required key is missing."""


class TypeMismatchError(HarCodecError):
    """Raised when a value has the wrong JSON type for its field."""

    def __init__(self, expected: str, actual: object, path: str = "") -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected}, got {_describe(actual)}", path)


class InvalidTimestampError(HarCodecError):
    """A date-time that is not ISO 8601 with a timezone offset.

    Recovered during decoding: the raw string is kept and the error is
    appended to ``Archive.issues`` instead of being raised.
    """

    def __init__(self, raw: str, path: str = "") -> None:
        self.raw = raw
        super().__init__(f"Invalid ISO 8601 timestamp {raw!r}", path)


class UnencodableValueError(HarCodecError):
    """Raised when encoding a record whose required field is not set."""


def _describe(value: object) -> str:
    """Name the JSON type of a decoded value for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
