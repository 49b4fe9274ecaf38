"""
DB Manager - unified CLI for MongoDB, MySQL and SQLite

Create, read, update and delete records, inspect schemas, move data in
and out as CSV or JSON, and take backups through one interactive menu,
whatever the backend.
"""

__version__ = "1.0.0"
__author__ = "Systems Engineering Portfolio"
