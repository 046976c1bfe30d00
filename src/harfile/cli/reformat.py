"""Format command for harfile CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


def _default_output(input_file: Path, compress: bool) -> Path:
    """Derive input.formatted.har (or .har.gz) next to the input file."""
    name = input_file.name
    for suffix in (".har.gz", ".har"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break
    return input_file.with_name(name + (".formatted.har.gz" if compress else ".formatted.har"))


def reformat(
    input_file: Annotated[
        Path,
        typer.Argument(help="HAR file to re-encode (.har or .har.gz)"),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output filename (default: input.formatted.har)"),
    ] = None,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Write single-line JSON instead of indenting"),
    ] = False,
    compress: Annotated[
        bool,
        typer.Option("--compress", "-c", help="Gzip the output"),
    ] = False,
    max_size: Annotated[
        int,
        typer.Option("--max-size", help="Max file size in MB (default: 100, 0=unlimited)"),
    ] = 100,
    compression_level: Annotated[
        int,
        typer.Option("--compression-level", help="Gzip compression level 1-9 (default: 9)"),
    ] = 9,
) -> None:
    """Decode a HAR file and write it back in canonical form.

    Keys are written in HAR order, absent optional fields are left out and
    -1 markers are kept, so formatting the same archive twice gives
    identical files. Unknown keys are dropped.

    Args:
        input_file: HAR file to re-encode
        output: Output filename (default: input.formatted.har)
        compact: Write single-line JSON
        compress: Gzip the output
        max_size: Maximum file size in MB (default: 100, 0=unlimited)
        compression_level: Gzip compression level 1-9 (default: 9)

    Example:
        harfile format capture.har
        harfile format capture.har --output clean.har
        harfile format capture.har.gz --compact --compress
    """
    from harfile.codec import (
        HarSizeError,
        MalformedInputError,
        TypeMismatchError,
        UnencodableValueError,
        read_har,
        write_har,
    )

    if not input_file.exists():
        typer.echo(f"Error: File not found: {input_file}", err=True)
        raise typer.Exit(1)

    if not 1 <= compression_level <= 9:
        typer.echo(f"Error: compression-level must be 1-9, got {compression_level}", err=True)
        raise typer.Exit(1)

    if max_size < 0:
        typer.echo(f"Error: max-size must be >= 0, got {max_size}", err=True)
        raise typer.Exit(1)
    max_size_bytes = max_size * 1024 * 1024 if max_size > 0 else None

    output_path = output if output else _default_output(input_file, compress)

    typer.echo(f"Formatting {input_file}...")
    try:
        archive = read_har(input_file, max_size=max_size_bytes)
        for issue in archive.issues:
            typer.echo(f"  [WARN] {issue}")
        result_path = write_har(
            archive,
            output_path,
            indent=None if compact else 2,
            compress=compress or None,
            compression_level=compression_level,
        )
    except HarSizeError as e:
        size_mb = e.size / 1024 / 1024
        limit_mb = e.max_size / 1024 / 1024
        typer.echo(f"Error: File too large ({size_mb:.1f} MB > {limit_mb:.1f} MB limit)", err=True)
        typer.echo("  Use --max-size to increase limit or --max-size 0 to disable", err=True)
        raise typer.Exit(1) from None
    except (MalformedInputError, TypeMismatchError) as e:
        typer.echo(f"Error: Invalid HAR file: {e}", err=True)
        raise typer.Exit(1) from None
    except UnencodableValueError as e:
        typer.echo(f"Error: Cannot encode archive: {e}", err=True)
        raise typer.Exit(1) from None
    except PermissionError as e:
        typer.echo(f"Error: Permission denied: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except OSError as e:
        typer.echo(f"Error: I/O error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"  Written: {result_path}")
