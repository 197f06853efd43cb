"""Click CLI for saving, listing and jumping to project directories."""

from teleproj.cli.main import cli

__all__ = ["cli"]
