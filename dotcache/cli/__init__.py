"""Command-line interface for dotcache."""

from dotcache.cli.main import cli, main

__all__ = ["cli", "main"]
