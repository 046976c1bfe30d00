"""HAR (HTTP Archive) 1.2 schema and lossless codec.

This library provides:
- Record types for every HAR 1.2 object
- A decoder and encoder that keep "absent", "-1" and "0" apart
- File helpers for .har and .har.gz files

The core has ZERO dependencies (only stdlib).
Optional features require: typer (cli).

Example usage:
    from harfile import decode, encode

    archive = decode(raw_bytes)
    for entry in archive.log.entries:
        print(entry.request.url, entry.timings.total())

    # Recovered problems (e.g. invalid timestamps)
    for issue in archive.issues:
        print(issue.path, issue)

    raw_again = encode(archive)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export public API for convenience
from harfile.codec import (
    HarCodecError,
    HarSizeError,
    InvalidTimestampError,
    MalformedInputError,
    TypeMismatchError,
    UnencodableValueError,
    decode,
    encode,
    read_har,
    write_har,
)
from harfile.schema import Archive, Measure, MeasureState, Timestamp

__all__ = [
    "__version__",
    "decode",
    "encode",
    "read_har",
    "write_har",
    "Archive",
    "Measure",
    "MeasureState",
    "Timestamp",
    "HarCodecError",
    "HarSizeError",
    "InvalidTimestampError",
    "MalformedInputError",
    "TypeMismatchError",
    "UnencodableValueError",
]
