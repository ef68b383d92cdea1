"""MySQL database implementation package."""

from .mysql_manager import MySQLManager
from .statement_builder import MySQLStatementBuilder

__all__ = [
    "MySQLManager",
    "MySQLStatementBuilder",
]
