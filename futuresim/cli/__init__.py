"""CLI commands for futuresim.

This package provides the command-line interface for futuresim,
including account, trading, portfolio and market commands.
"""

from futuresim.cli.main import cli, main

__all__ = ["cli", "main"]
