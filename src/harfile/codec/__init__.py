"""HAR 1.2 codec.

Converts between HAR JSON bytes and the record graph in harfile.schema
without losing the difference between absent, -1 and zero values. The
codec itself is pure; files.py adds file reading and writing.

Exports:
    - decode: Bytes to Archive
    - encode: Archive to bytes
    - read_har / write_har: File helpers with size limit and gzip support
    - HarCodecError and its subclasses: Error kinds carrying a field path
"""

from __future__ import annotations

from harfile.codec.decode import decode
from harfile.codec.encode import DEFAULT_INDENT, encode, to_document
from harfile.codec.errors import (
    HarCodecError,
    InvalidTimestampError,
    MalformedInputError,
    TypeMismatchError,
    UnencodableValueError,
)
from harfile.codec.files import (
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_MAX_HAR_SIZE,
    HarSizeError,
    read_har,
    write_har,
)

__all__ = [
    # Codec
    "decode",
    "encode",
    "to_document",
    "DEFAULT_INDENT",
    # Files
    "read_har",
    "write_har",
    "DEFAULT_MAX_HAR_SIZE",
    "DEFAULT_COMPRESSION_LEVEL",
    # Errors
    "HarCodecError",
    "MalformedInputError",
    "TypeMismatchError",
    "InvalidTimestampError",
    "UnencodableValueError",
    "HarSizeError",
]
