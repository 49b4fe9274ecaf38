"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (the click CLI)
- Outbound adapters: Implement external dependencies (database clients, dump tools)
"""

from db_manager.adapters.outbound import (
    BackendFactory,
    MongoBackend,
    MySQLBackend,
    SQLiteBackend,
)

__all__ = [
    # Outbound adapters
    "BackendFactory",
    "MongoBackend",
    "MySQLBackend",
    "SQLiteBackend",
]
