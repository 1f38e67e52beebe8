"""CLI application setup using Typer.

Provides the command-line interface for Valet.
"""

from valet.cli.main import app

__all__ = ["app"]
