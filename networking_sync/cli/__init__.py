"""Command line interface (``networking-sync`` / ``python -m networking_sync.cli``)."""

from .commands import main

__all__ = ["main"]
