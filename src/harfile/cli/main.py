"""Typer application behind the ``harfile`` command.

``check`` runs the decoder and the consistency checks over one or more
files and reports per-file results. ``format`` decodes a file and writes it
back in canonical HAR key order, optionally compact or gzip compressed.
Both accept ``.har`` and ``.har.gz`` input.
"""

from __future__ import annotations

try:
    import typer
except ImportError as e:
    raise ImportError("CLI dependencies not installed. Install with: pip install harfile[cli]") from e

from harfile.cli.check import check
from harfile.cli.reformat import reformat

app = typer.Typer(
    name="harfile",
    help="Decode, check and canonically re-encode HAR 1.2 archives.",
    no_args_is_help=True,
)

app.command(help="Report structural errors and consistency warnings in HAR files")(check)
app.command(name="format", help="Rewrite a HAR file with canonical key order and formatting")(reformat)


def _show_version(value: bool) -> None:
    if value:
        from harfile import __version__

        typer.echo(f"harfile {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_show_version,
        is_eager=True,
        help="Show the harfile version and exit.",
    ),
) -> None:
    r"""Decode, check and canonically re-encode HAR 1.2 archives.

    Timings and sizes keep their three states (absent, -1, value) and
    timestamps keep their original spelling, so ``format`` only changes key
    order, whitespace and unknown keys.

    \b
    Examples:
        harfile check capture.har
        harfile check a.har b.har.gz --strict --tolerance 2
        harfile format capture.har --output clean.har
        harfile format capture.har --compact --compress
    """
