"""CLI entry point for DrawFetcher."""

from .cli import run

run()
