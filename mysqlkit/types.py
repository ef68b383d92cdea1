"""Common type definitions for mysqlkit."""

from enum import Enum
from typing import Any, TypeAlias

ScalarType: TypeAlias = str | int | float | bool
RowType: TypeAlias = dict[str, Any]


class ForeignKeyAction(str, Enum):
    """Referential actions allowed in foreign key constraints."""

    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    NO_ACTION = "NO ACTION"


class ExecutionMode(str, Enum):
    """How a group of generated statements is sent to the database."""

    TRANSACTION = "transaction"
    INDEPENDENT = "independent"
