"""Command-line interface."""

from src.cli.main import cli, main


__all__ = ["cli", "main"]
