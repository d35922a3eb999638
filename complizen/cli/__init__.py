"""Command-line entry points."""

from complizen.cli.main import cli

__all__ = ["cli"]
