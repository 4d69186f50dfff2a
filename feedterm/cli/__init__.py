"""Command line interface for feedterm."""

from feedterm.cli.app import main

__all__ = ["main"]
