"""Consistency checks for HAR archives.

Exports:
    - validate_archive: Check a decoded archive
    - validate_har: Read a HAR file and check it
    - Finding: Dataclass for check findings
"""

from __future__ import annotations

from harfile.validation.consistency import (
    DEFAULT_TIME_TOLERANCE,
    Finding,
    check_entry_time,
    check_page_refs,
    check_timestamps,
    validate_archive,
    validate_har,
)

__all__ = [
    "DEFAULT_TIME_TOLERANCE",
    "Finding",
    "check_entry_time",
    "check_page_refs",
    "check_timestamps",
    "validate_archive",
    "validate_har",
]
