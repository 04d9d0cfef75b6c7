"""CLI commands for stockledger.

This package provides the command-line interface for stockledger,
including trading commands and the portfolio view.
"""

from stockledger.cli.main import cli, main

__all__ = ["cli", "main"]
