"""MySQL-specific statement builder implementation."""

from collections.abc import Sequence
from typing import Any

from mysqlkit.database.identifier import escape_id
from mysqlkit.database.interfaces.statement_builder import StatementBuilder
from mysqlkit.database.schema import ColumnSpec, TableDefinition, to_table_definition
from mysqlkit.database.statement import Statement
from mysqlkit.exceptions import ValidationError

PLACEHOLDERS = {
    "format": "%s",
    "pyformat": "%s",
    "qmark": "?",
}


class MySQLStatementBuilder(StatementBuilder):
    """MySQL/MariaDB statement builder.

    Identifiers are always quoted. Values, including column defaults, are
    always bound as parameters using the placeholder of the driver's paramstyle.
    Under the ``format`` paramstyle a literal ``%`` in a statement carrying
    parameters is doubled, since the driver %-formats such statements.
    """

    def __init__(self, paramstyle: str = "format") -> None:
        """Initialize the builder.

        Args:
            paramstyle: DBAPI paramstyle of the driver that will run the statements
        """
        if paramstyle not in PLACEHOLDERS:
            raise ValueError(f"Unsupported paramstyle: {paramstyle}")
        self.paramstyle = paramstyle
        self.placeholder = PLACEHOLDERS[paramstyle]

    def build_table(self, table: TableDefinition) -> list[Statement]:
        """Generate CREATE TABLE and CREATE UNIQUE INDEX statements.

        Args:
            table: Table definition

        Returns:
            List of statements, the CREATE TABLE first
        """
        params: list[Any] = []
        parts: list[str] = []
        bound = any(column.default is not None for column in table.columns)

        for column in table.columns:
            col_def = self._text(
                f"{escape_id(column.name, qualified=False)} {column.type.upper()} "
                f"{'NULL' if column.nullable else 'NOT NULL'}",
                bound,
            )
            if column.default is not None:
                col_def += f" DEFAULT {self.placeholder}"
                params.append(column.default)
            parts.append(col_def)

        parts.append(
            self._text(
                f"PRIMARY KEY ({escape_id(table.primary_key, qualified=False)})", bound
            )
        )

        for column in table.columns:
            if column.foreign_key is not None:
                parts.append(self._text(self._foreign_key_sql(table.name, column), bound))

        name = self._text(escape_id(table.name), bound)
        sql = f"CREATE TABLE IF NOT EXISTS {name} ({', '.join(parts)})"
        if table.table_options.strip():
            sql += f" {self._text(table.table_options.strip(), bound)}"

        statements = [Statement(f"{sql};", tuple(params))]
        statements.extend(
            self._unique_index_statement(table.name, column)
            for column in table.unique_columns
        )
        return statements

    def build_create_table(
        self,
        table: str,
        columns: Sequence[ColumnSpec | dict[str, Any]],
        primary_key: Sequence[str],
        table_options: str | None = None,
    ) -> list[Statement]:
        """Generate the statements creating a table.

        Args:
            table: Table name
            columns: Column specs or dictionaries with the same keys
            primary_key: Primary key column names (non-empty)
            table_options: Table options, defaults to the InnoDB compressed preset

        Returns:
            List of statements, the CREATE TABLE first

        Raises:
            ValidationError: If columns are malformed or the primary key is empty
        """
        definition = to_table_definition(table, columns, primary_key, table_options)
        return self.build_table(definition)

    def build_multi_insert(
        self,
        table: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> Statement:
        """Generate ``INSERT INTO t (cols) VALUES (...),(...)``.

        Every row must be as wide as ``columns``, or as the first row when
        ``columns`` is empty.

        Raises:
            ValidationError: If there are no rows or a row has the wrong width
        """
        rows = list(rows)
        if not rows:
            raise ValidationError(f"No rows given for insert into {table!r}")

        width = len(columns) if columns else len(rows[0])
        if width == 0:
            raise ValidationError(f"Rows for {table!r} must contain values")

        for index, row in enumerate(rows):
            if len(row) != width:
                raise ValidationError(
                    f"Row {index} for {table!r} has {len(row)} values, "
                    f"expected {width}"
                )

        group = "(" + ",".join([self.placeholder] * width) + ")"
        column_sql = f" ({escape_id(columns, qualified=False)})" if columns else ""
        sql = (
            f"INSERT INTO {self._text(escape_id(table) + column_sql, True)} "
            f"VALUES {','.join([group] * len(rows))}"
        )
        params = tuple(value for row in rows for value in row)
        return Statement(sql, params)

    def build_multi_update(
        self,
        table: str,
        primary_key: Sequence[str],
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> Statement:
        """Generate an ``INSERT ... ON DUPLICATE KEY UPDATE`` upsert.

        Rows whose key already exists get their non-key columns overwritten;
        new keys are inserted.

        Raises:
            ValidationError: If columns or primary key are empty, or no column
                is left to update
        """
        keys = [primary_key] if isinstance(primary_key, str) else list(primary_key)
        if not columns:
            raise ValidationError(f"Upsert into {table!r} requires columns")
        if not keys:
            raise ValidationError(f"Upsert into {table!r} requires a primary key")

        updates = [column for column in columns if column not in keys]
        if not updates:
            raise ValidationError(
                f"Upsert into {table!r} has no non-key columns to update"
            )

        base = self.build_multi_insert(table, columns, rows)
        assignments = ", ".join(
            f"{quoted} = VALUES({quoted})"
            for quoted in (
                self._text(escape_id(column, qualified=False), True) for column in updates
            )
        )
        return Statement(f"{base.sql} ON DUPLICATE KEY UPDATE {assignments}", base.params)

    def build_drop_table(self, tables: str | Sequence[str]) -> Statement:
        """Generate ``DROP TABLE IF EXISTS`` for one or more tables."""
        names = [tables] if isinstance(tables, str) else list(tables)
        if not names:
            raise ValidationError("No tables given to drop")
        return Statement(f"DROP TABLE IF EXISTS {escape_id(names)};")

    def build_list_tables(self) -> Statement:
        """Generate ``SHOW TABLES``."""
        return Statement("SHOW TABLES")

    def build_use_database(self, database: str) -> Statement:
        """Generate ``USE <database>``."""
        return Statement(f"USE {escape_id(database, qualified=False)}")

    def _text(self, sql: str, bound: bool) -> str:
        """Double literal ``%`` in SQL that the driver will %-format."""
        if bound and self.placeholder == "%s":
            return sql.replace("%", "%%")
        return sql

    def _foreign_key_sql(self, table: str, column: ColumnSpec) -> str:
        foreign_key = column.foreign_key
        assert foreign_key is not None

        constraint = escape_id(
            f"{_base_name(table)}_{column.name}_foreign_key", qualified=False
        )
        sql = (
            f"CONSTRAINT {constraint} "
            f"FOREIGN KEY ({escape_id(column.name, qualified=False)}) "
            f"REFERENCES {escape_id(foreign_key.table)} "
            f"({escape_id(foreign_key.column, qualified=False)})"
        )
        if foreign_key.on_delete is not None:
            sql += f" ON DELETE {foreign_key.on_delete.value}"
        if foreign_key.on_update is not None:
            sql += f" ON UPDATE {foreign_key.on_update.value}"
        return sql

    def _unique_index_statement(self, table: str, column: ColumnSpec) -> Statement:
        index_name = escape_id(f"{_base_name(table)}_unique_{column.name}", qualified=False)
        return Statement(
            f"CREATE UNIQUE INDEX IF NOT EXISTS {index_name} "
            f"ON {escape_id(table)} ({escape_id(column.name, qualified=False)})"
        )


def _base_name(table: str) -> str:
    """Table name without its schema qualifier."""
    return table.rsplit(".", 1)[-1]
