"""Database manager interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from mysqlkit.database.statement import QueryOutcome, Statement


class DatabaseManager(ABC):
    """Abstract executor sending statements to a connection pool."""

    @abstractmethod
    async def connect(self) -> None:
        """Prepare the connection pool."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close every pooled connection."""
        pass

    @abstractmethod
    async def execute(
        self, statement: Statement, connection: Any | None = None
    ) -> QueryOutcome:
        """Execute one statement.

        Args:
            statement: Statement to run
            connection: Connection to run it on, or None to borrow one from the pool

        Returns:
            Rows and metadata of the statement
        """
        pass

    @abstractmethod
    async def transaction(self, statements: Sequence[Statement]) -> list[QueryOutcome]:
        """Execute statements in order inside one transaction.

        Args:
            statements: Statements to run

        Returns:
            One outcome per statement, only when the transaction committed
        """
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the pool is ready."""
        pass

    async def __aenter__(self) -> "DatabaseManager":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()
