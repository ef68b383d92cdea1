"""Exceptions raised by mysqlkit."""

from typing import Any


class MySQLKitError(Exception):
    """Base exception for mysqlkit errors."""

    pass


class ValidationError(MySQLKitError):
    """Raised when builder input is malformed."""

    pass


class QueryError(MySQLKitError):
    """Raised when the driver reports a failure for a statement."""

    def __init__(
        self,
        message: str,
        error: BaseException | None = None,
        sql: str | None = None,
        params: tuple[Any, ...] = (),
    ):
        super().__init__(message)
        self.error = error
        self.sql = sql
        self.params = params


class RollbackError(QueryError):
    """Raised when a transaction could not be rolled back after a failure."""

    def __init__(
        self,
        message: str,
        error: BaseException | None = None,
        original_error: BaseException | None = None,
    ):
        super().__init__(message, error=error, sql="ROLLBACK")
        self.original_error = original_error


class PoolError(MySQLKitError):
    """Raised when the connection pool cannot lend or dispose connections."""

    def __init__(self, message: str, error: BaseException | None = None):
        super().__init__(message)
        self.error = error
