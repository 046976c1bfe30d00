"""Read and write HAR files on disk.

Thin wrappers around decode/encode that own the file I/O: a size limit
checked before reading, and transparent gzip for ``.gz`` paths.
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

from harfile.codec.decode import decode
from harfile.codec.encode import DEFAULT_INDENT, encode
from harfile.schema import Archive

_LOGGER = logging.getLogger(__name__)

# Default maximum HAR file size (100 MB)
DEFAULT_MAX_HAR_SIZE = 100 * 1024 * 1024

# Default gzip compression level for written archives
DEFAULT_COMPRESSION_LEVEL = 9


class HarSizeError(ValueError):
    """Raised when HAR file exceeds size limit."""

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"HAR file size ({size:,} bytes) exceeds limit ({max_size:,} bytes). "
            f"Use max_size parameter to increase or set to None to disable."
        )


def _is_gzip_path(path: Path) -> bool:
    return path.suffix.lower() == ".gz"


def read_har(
    path: str | Path,
    *,
    max_size: int | None = DEFAULT_MAX_HAR_SIZE,
) -> Archive:
    """Read and decode a HAR file.

    Args:
        path: Path to a .har file, or a gzip compressed .har.gz file
        max_size: Maximum size in bytes of the file (and of the decompressed
            document for .gz files). Set to None to disable.

    Returns:
        The decoded archive

    Raises:
        HarSizeError: If the file exceeds max_size
        FileNotFoundError: If the file doesn't exist
        MalformedInputError: If the file is not a HAR document
        TypeMismatchError: If a value has the wrong JSON type

    Example:
        >>> # archive = read_har("capture.har")
        >>> # archive = read_har("capture.har.gz", max_size=None)
    """
    path = Path(path)

    if max_size is not None:
        file_size = path.stat().st_size
        if file_size > max_size:
            raise HarSizeError(file_size, max_size)

    if _is_gzip_path(path):
        with gzip.open(path, "rb") as f:
            # Read one byte past the limit to detect oversized payloads
            data = f.read() if max_size is None else f.read(max_size + 1)
        if max_size is not None and len(data) > max_size:
            raise HarSizeError(len(data), max_size)
    else:
        data = path.read_bytes()

    _LOGGER.debug("Read %d bytes from %s", len(data), path)
    archive = decode(data)
    for issue in archive.issues:
        _LOGGER.debug("%s: %s", path, issue)
    return archive


def write_har(
    archive: Archive,
    path: str | Path,
    *,
    indent: int | None = DEFAULT_INDENT,
    compress: bool | None = None,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
) -> Path:
    """Encode an archive and write it to disk.

    Args:
        archive: Archive to write
        path: Output path
        indent: Indentation width, or None for compact output
        compress: Gzip the output. Defaults to True when path ends in .gz.
        compression_level: Gzip compression level 1-9

    Returns:
        Path to the written file

    Raises:
        UnencodableValueError: If a required field is not set
        ValueError: If compression_level is out of range
    """
    path = Path(path)
    if compress is None:
        compress = _is_gzip_path(path)
    if compress and not 1 <= compression_level <= 9:
        raise ValueError(f"compression_level must be 1-9, got {compression_level}")

    data = encode(archive, indent=indent)

    if compress:
        with gzip.open(path, "wb", compresslevel=compression_level) as f:
            f.write(data)
    else:
        path.write_bytes(data)

    _LOGGER.info("HAR written to: %s", path)
    return path
