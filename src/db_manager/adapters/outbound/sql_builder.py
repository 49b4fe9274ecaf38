"""SQL statement builder using sqlglot.

Table and column names come from prompts, so they are never spliced into
statements raw: sqlglot quotes them for the target dialect, and values are
always bound through the driver's placeholder. Column definitions for new
tables are free text; they are parsed with sqlglot first so a malformed or
multi-statement definition is rejected before it reaches the server.

References:
    - sqlglot documentation: https://sqlglot.com/
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from db_manager.domain.errors import SchemaDefinitionError


class SQLBuilder:
    """Builds parameterized SQL for one dialect.

    Example:
        >>> builder = SQLBuilder(dialect="sqlite", placeholder="?")
        >>> builder.insert("users", ["id", "name"])
        'INSERT INTO "users" ("id", "name") VALUES (?, ?)'
    """

    def __init__(self, dialect: str = "sqlite", placeholder: str = "?") -> None:
        """Initialize the builder.

        Args:
            dialect: sqlglot dialect name ("sqlite", "mysql").
            placeholder: Driver parameter marker ("?" or "%s").
        """
        self._dialect = dialect
        self._placeholder = placeholder

    @property
    def dialect(self) -> str:
        return self._dialect

    def _escape(self, sql: str) -> str:
        # pyformat drivers interpolate the whole statement
        if self._placeholder == "%s":
            return sql.replace("%", "%%")
        return sql

    def _identifier(self, name: str) -> str:
        return exp.to_identifier(name, quoted=True).sql(dialect=self._dialect)

    def quote(self, name: str) -> str:
        """Quote an identifier for the dialect."""
        return self._escape(self._identifier(name))

    def _params(self, count: int) -> str:
        return ", ".join([self._placeholder] * count)

    def create_table(self, table: str, columns: str, *, if_not_exists: bool = False) -> str:
        """Build a CREATE TABLE statement from free-text column definitions.

        Raises:
            SchemaDefinitionError: If the definitions are empty, do not
                parse, or smuggle in another statement.
        """
        definitions = columns.strip().rstrip(";").strip()
        if not definitions:
            raise SchemaDefinitionError(
                f'Column definitions are required to create table "{table}", '
                'e.g. "id INT PRIMARY KEY, name VARCHAR(255)"'
            )

        guard = "IF NOT EXISTS " if if_not_exists else ""
        sql = f"CREATE TABLE {guard}{self._identifier(table)} ({definitions})"

        try:
            statements = sqlglot.parse(sql, dialect=self._dialect)
        except SqlglotError as e:
            raise SchemaDefinitionError(f"Invalid column definitions: {e}") from e

        statements = [stmt for stmt in statements if stmt is not None]
        if len(statements) != 1 or not isinstance(statements[0], exp.Create):
            raise SchemaDefinitionError(
                "Column definitions must form a single CREATE TABLE statement"
            )

        return self._escape(sql)

    def select_all(self, table: str) -> str:
        return f"SELECT * FROM {self.quote(table)}"

    def insert(self, table: str, columns: Sequence[str]) -> str:
        column_list = ", ".join(self.quote(c) for c in columns)
        return f"INSERT INTO {self.quote(table)} ({column_list}) VALUES ({self._params(len(columns))})"

    def update(self, table: str, columns: Sequence[str], id_column: str) -> str:
        assignments = ", ".join(f"{self.quote(c)} = {self._placeholder}" for c in columns)
        return (
            f"UPDATE {self.quote(table)} SET {assignments} "
            f"WHERE {self.quote(id_column)} = {self._placeholder}"
        )

    def delete(self, table: str, id_column: str) -> str:
        return f"DELETE FROM {self.quote(table)} WHERE {self.quote(id_column)} = {self._placeholder}"
