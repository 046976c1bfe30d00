"""Entry point for ``python -m harfile`` and the ``harfile`` script."""

from __future__ import annotations

import sys


def main() -> None:
    """Run the CLI, or explain how to install it when typer is missing."""
    try:
        from harfile.cli.main import app
    except ImportError as e:
        sys.stderr.write(f"harfile: the command line tool needs typer ({e}).\n")
        sys.stderr.write("Install it with: pip install harfile[cli]\n")
        sys.exit(1)

    app()


if __name__ == "__main__":
    main()
