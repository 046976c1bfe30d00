"""Check command for harfile CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


def check(
    har_files: Annotated[
        list[Path],
        typer.Argument(help="HAR files to check (.har or .har.gz)"),
    ],
    strict: Annotated[
        bool,
        typer.Option("--strict", "-s", help="Treat warnings as errors"),
    ] = False,
    tolerance: Annotated[
        float,
        typer.Option("--tolerance", "-t", help="Allowed entry time drift in ms (default: 1.0)"),
    ] = 1.0,
    max_size: Annotated[
        int,
        typer.Option("--max-size", help="Max file size in MB (default: 100, 0=unlimited)"),
    ] = 100,
) -> None:
    """Decode HAR files and report problems.

    Structural problems (missing required fields, wrong value types) are
    errors. Invalid timestamps, entry times that don't match their timings
    and dangling page references are warnings.

    Args:
        har_files: HAR files to check
        strict: Treat warnings as errors (exit code 1)
        tolerance: Allowed difference between entry time and timings sum
        max_size: Maximum file size in MB (0=unlimited)

    Example:
        harfile check capture.har
        harfile check captures/*.har --strict
        harfile check big.har.gz --max-size 0
    """
    from harfile.codec import HarCodecError, HarSizeError
    from harfile.validation import validate_har

    if max_size < 0:
        typer.echo(f"Error: max-size must be >= 0, got {max_size}", err=True)
        raise typer.Exit(1)
    max_size_bytes = max_size * 1024 * 1024 if max_size > 0 else None

    total_errors = 0
    total_warnings = 0

    for file_path in har_files:
        if not file_path.exists():
            typer.echo(f"[ERROR] {file_path}: File not found", err=True)
            total_errors += 1
            continue

        try:
            findings = validate_har(file_path, max_size=max_size_bytes, tolerance=tolerance)
        except (HarCodecError, HarSizeError) as e:
            typer.echo(f"[ERROR] {file_path}: {e}", err=True)
            total_errors += 1
            continue
        except OSError as e:
            typer.echo(f"[ERROR] {file_path}: I/O error: {e}", err=True)
            total_errors += 1
            continue

        if findings:
            typer.echo(f"\n{file_path}:")
            for finding in findings:
                icon = "[ERROR]" if finding.severity == "error" else "[WARN]"
                typer.echo(f"  {icon} [{finding.location}]")
                typer.echo(f"     {finding.field}: {finding.value}")
                typer.echo(f"     Reason: {finding.reason}")

                if finding.severity == "error":
                    total_errors += 1
                else:
                    total_warnings += 1
        else:
            typer.echo(f"[OK] {file_path}: Valid")

    typer.echo(f"\nSummary: {total_errors} errors, {total_warnings} warnings")

    if total_errors > 0:
        raise typer.Exit(1)
    if strict and total_warnings > 0:
        raise typer.Exit(1)
