"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the database client libraries the
manager depends on.
"""

from db_manager.ports.outbound.database_backend import DatabaseBackend

__all__ = [
    "DatabaseBackend",
]
