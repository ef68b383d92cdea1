"""A simple helper layer for MySQL/MariaDB connection pools."""

from .config import DEFAULT_TABLE_OPTIONS, Settings, load_settings
from .database import (
    ColumnSpec,
    ForeignKey,
    LoggingPoolObserver,
    MySQLManager,
    MySQLStatementBuilder,
    PoolObserver,
    QueryMetadata,
    QueryOutcome,
    Statement,
    TableDefinition,
    escape,
    escape_id,
)
from .exceptions import (
    MySQLKitError,
    PoolError,
    QueryError,
    RollbackError,
    ValidationError,
)
from .log import (
    get_logger,
    setup_logging,
    setup_logging_from_settings,
    setup_production_logging,
    setup_test_logging,
)
from .types import ExecutionMode, ForeignKeyAction

__all__ = [
    "DEFAULT_TABLE_OPTIONS",
    "ColumnSpec",
    "ExecutionMode",
    "ForeignKey",
    "ForeignKeyAction",
    "LoggingPoolObserver",
    "MySQLKitError",
    "MySQLManager",
    "MySQLStatementBuilder",
    "PoolError",
    "PoolObserver",
    "QueryError",
    "QueryMetadata",
    "QueryOutcome",
    "RollbackError",
    "Settings",
    "Statement",
    "TableDefinition",
    "ValidationError",
    "escape",
    "escape_id",
    "get_logger",
    "load_settings",
    "setup_logging",
    "setup_logging_from_settings",
    "setup_production_logging",
    "setup_test_logging",
]
