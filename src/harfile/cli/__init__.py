"""CLI for harfile.

This module provides a Typer-based CLI for checking and re-encoding
HAR files.

Requires the 'cli' optional dependency: pip install harfile[cli]
"""

from __future__ import annotations
