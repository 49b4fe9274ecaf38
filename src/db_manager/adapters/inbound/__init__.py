"""Inbound adapters for the database manager.

Provides the click command-line interface (``dbm``).
"""

from db_manager.adapters.inbound.cli import cli, main

__all__ = ["cli", "main"]
