"""Inbound ports - API contracts for the database manager.

Inbound ports define the interface the CLI uses to run operations.
"""

from db_manager.ports.inbound.database_operations import DatabaseOperations

__all__ = [
    "DatabaseOperations",
]
