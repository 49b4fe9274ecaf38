"""Outbound adapters - implementations of the DatabaseBackend port.

- MongoBackend: document store over pymongo
- MySQLBackend: relational server over pymysql
- SQLiteBackend: embedded relational file over sqlite3
- BackendFactory: builds the adapter for a BackendType from config
"""

from db_manager.adapters.outbound.factory import BackendFactory
from db_manager.adapters.outbound.mongo_backend import MongoBackend
from db_manager.adapters.outbound.mysql_backend import MySQLBackend
from db_manager.adapters.outbound.sql_builder import SQLBuilder
from db_manager.adapters.outbound.sqlite_backend import SQLiteBackend

__all__ = [
    "BackendFactory",
    "MongoBackend",
    "MySQLBackend",
    "SQLiteBackend",
    "SQLBuilder",
]
