"""Database interfaces module."""

from .manager import DatabaseManager
from .statement_builder import StatementBuilder

__all__ = [
    "DatabaseManager",
    "StatementBuilder",
]
