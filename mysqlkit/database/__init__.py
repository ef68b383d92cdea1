"""Database module: statement building and execution."""

from .engine import create_database_engine, setup_database_url
from .identifier import escape, escape_id
from .implementations import MySQLManager, MySQLStatementBuilder
from .interfaces import DatabaseManager, StatementBuilder
from .observer import LoggingPoolObserver, PoolObserver
from .schema import ColumnSpec, ForeignKey, TableDefinition
from .statement import QueryMetadata, QueryOutcome, Statement

__all__ = [
    "ColumnSpec",
    "DatabaseManager",
    "ForeignKey",
    "LoggingPoolObserver",
    "MySQLManager",
    "MySQLStatementBuilder",
    "PoolObserver",
    "QueryMetadata",
    "QueryOutcome",
    "Statement",
    "StatementBuilder",
    "TableDefinition",
    "create_database_engine",
    "escape",
    "escape_id",
    "setup_database_url",
]
