"""Command-line interface for polyroute.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for connector routing
- Verbose/quiet output modes
- Dry-run mode listing conflicting connectors
- Detailed error reporting
"""

from polyroute.cli.app import cli, main

__all__ = ["cli", "main"]
