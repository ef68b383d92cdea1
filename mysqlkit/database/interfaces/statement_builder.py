"""Abstract statement builder interface for different SQL backends."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from mysqlkit.database.schema import ColumnSpec, TableDefinition
from mysqlkit.database.statement import Statement


class StatementBuilder(ABC):
    """Abstract builder turning structured input into SQL statements."""

    @abstractmethod
    def build_table(self, table: TableDefinition) -> list[Statement]:
        """Generate the statements creating a table and its unique indexes.

        Args:
            table: Table definition

        Returns:
            CREATE TABLE statement followed by one statement per unique column
        """
        pass

    @abstractmethod
    def build_create_table(
        self,
        table: str,
        columns: Sequence[ColumnSpec | dict[str, Any]],
        primary_key: Sequence[str],
        table_options: str | None = None,
    ) -> list[Statement]:
        """Generate the statements creating a table from loose arguments."""
        pass

    @abstractmethod
    def build_multi_insert(
        self,
        table: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> Statement:
        """Generate a single INSERT carrying many rows.

        Args:
            table: Table name
            columns: Column names, or empty to insert positionally
            rows: Row values in column order

        Returns:
            INSERT statement
        """
        pass

    @abstractmethod
    def build_multi_update(
        self,
        table: str,
        primary_key: Sequence[str],
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> Statement:
        """Generate an upsert that updates non-key columns on key collisions.

        Args:
            table: Table name
            primary_key: Key column names
            columns: Column names
            rows: Row values in column order

        Returns:
            Upsert statement
        """
        pass

    @abstractmethod
    def build_drop_table(self, tables: str | Sequence[str]) -> Statement:
        """Generate DROP TABLE for one or more tables."""
        pass

    @abstractmethod
    def build_list_tables(self) -> Statement:
        """Generate the statement listing tables of the current schema."""
        pass

    @abstractmethod
    def build_use_database(self, database: str) -> Statement:
        """Generate the statement switching the current schema."""
        pass
