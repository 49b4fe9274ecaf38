"""Application layer - dispatches user operations to the selected backend.

DatabaseService implements the DatabaseOperations port on top of the
backend factory, adding name validation, tracing, metrics and logging.
"""

from db_manager.application.database_service import DatabaseService

__all__ = [
    "DatabaseService",
]
