"""Consistency checks for decoded HAR archives.

Decoding only enforces the document's structure. These checks look at the
relationships the HAR format documents but a decoder can't enforce:

- Entry.time should equal the sum of the applicable timings
- ssl time is part of connect time, so it can't exceed it
- Entry.pageref should name a page in the log
- Page ids should be unique
- Timestamps should be ISO 8601 with an offset

This module has ZERO external dependencies (stdlib only).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from harfile.codec import DEFAULT_MAX_HAR_SIZE, read_har
from harfile.schema import Archive, Entry, Log

# Allowed difference between Entry.time and the timings sum, in milliseconds.
# Exporters round each phase separately.
DEFAULT_TIME_TOLERANCE = 1.0


@dataclass
class Finding:
    """A consistency problem found in an archive.

    Attributes:
        severity: Finding severity ('error' or 'warning')
        location: Path of the record, e.g. log.entries[3]
        field: Name of the field with the problem
        value: The offending value, formatted for display
        reason: Human-readable explanation of why it was flagged
    """

    severity: str  # "error" or "warning"
    location: str
    field: str
    value: str
    reason: str


def check_entry_time(
    entry: Entry,
    location: str,
    findings: list[Finding],
    tolerance: float = DEFAULT_TIME_TOLERANCE,
) -> None:
    """Check that Entry.time matches its timings.

    Args:
        entry: Entry to check
        location: Location string for findings
        findings: List to append findings to
        tolerance: Allowed difference in milliseconds
    """
    if entry.timings is None or entry.time is None:
        return

    expected = entry.timings.total()
    if abs(entry.time - expected) > tolerance:
        findings.append(
            Finding(
                severity="warning",
                location=location,
                field="time",
                value=f"{entry.time:g}",
                reason=f"Entry time differs from sum of timings ({expected:g} ms)",
            )
        )

    timings = entry.timings
    if timings.ssl.has_value and timings.connect.has_value:
        ssl = timings.ssl.value_or(0)
        connect = timings.connect.value_or(0)
        if ssl > connect:
            findings.append(
                Finding(
                    severity="warning",
                    location=f"{location}.timings",
                    field="ssl",
                    value=f"{ssl:g}",
                    reason=f"ssl time exceeds connect time ({connect:g} ms) it is part of",
                )
            )


def check_page_refs(log: Log, findings: list[Finding]) -> None:
    """Check page ids are unique and every pageref names a page.

    Args:
        log: Log to check
        findings: List to append findings to
    """
    seen: set[str] = set()
    for i, page in enumerate(log.pages):
        if page.id is None:
            continue
        if page.id in seen:
            findings.append(
                Finding(
                    severity="warning",
                    location=f"log.pages[{i}]",
                    field="id",
                    value=page.id,
                    reason="Duplicate page id",
                )
            )
        seen.add(page.id)

    for i, entry in enumerate(log.entries):
        if entry.pageref is not None and entry.pageref not in seen:
            findings.append(
                Finding(
                    severity="warning",
                    location=f"log.entries[{i}]",
                    field="pageref",
                    value=entry.pageref,
                    reason="pageref does not match any page id",
                )
            )


def check_timestamps(archive: Archive, findings: list[Finding]) -> None:
    """Report timestamps the decoder had to keep as raw strings.

    Args:
        archive: Decoded archive
        findings: List to append findings to
    """
    for issue in archive.issues:
        location, _, field_name = issue.path.rpartition(".")
        findings.append(
            Finding(
                severity="warning",
                location=location,
                field=field_name,
                value=issue.raw,
                reason="Not an ISO 8601 date-time with timezone offset",
            )
        )


def validate_archive(archive: Archive, *, tolerance: float = DEFAULT_TIME_TOLERANCE) -> list[Finding]:
    """Run all consistency checks on a decoded archive.

    Args:
        archive: Decoded archive
        tolerance: Allowed Entry.time difference in milliseconds

    Returns:
        List of findings (empty if consistent)
    """
    findings: list[Finding] = []
    if archive.log is None:
        return findings

    check_timestamps(archive, findings)
    check_page_refs(archive.log, findings)
    for i, entry in enumerate(archive.log.entries):
        check_entry_time(entry, f"log.entries[{i}]", findings, tolerance)
    return findings


def validate_har(
    har_path: Path | str,
    *,
    max_size: int | None = DEFAULT_MAX_HAR_SIZE,
    tolerance: float = DEFAULT_TIME_TOLERANCE,
) -> list[Finding]:
    """Read a HAR file and run all consistency checks.

    Args:
        har_path: Path to .har or .har.gz file
        max_size: Maximum file size in bytes, None to disable
        tolerance: Allowed Entry.time difference in milliseconds

    Returns:
        List of findings

    Raises:
        HarCodecError: If the file is not a structurally valid HAR document
        HarSizeError: If the file exceeds max_size
    """
    archive = read_har(har_path, max_size=max_size)
    return validate_archive(archive, tolerance=tolerance)
