"""
CLI module for permafrost.

Provides the command-line interface using Click.
"""

from permafrost.cli.main import cli, main

__all__ = ["main", "cli"]
