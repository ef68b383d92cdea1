"""Database implementations package."""

from .mysql import MySQLManager, MySQLStatementBuilder

__all__ = [
    "MySQLManager",
    "MySQLStatementBuilder",
]
