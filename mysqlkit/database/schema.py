"""Table and column definitions used to build DDL."""

from collections.abc import Sequence
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from mysqlkit.config import DEFAULT_TABLE_OPTIONS
from mysqlkit.exceptions import ValidationError
from mysqlkit.types import ForeignKeyAction, ScalarType


class ForeignKey(BaseModel):
    """Reference from a column to a column of another table."""

    model_config = ConfigDict(frozen=True)

    table: str = Field(..., min_length=1)
    column: str = Field(..., min_length=1)
    on_delete: ForeignKeyAction | None = None
    on_update: ForeignKeyAction | None = None


class ColumnSpec(BaseModel):
    """Column definition."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, description="SQL type, e.g. varchar(255)")
    nullable: bool = False
    default: ScalarType | None = None
    unique: bool = False
    foreign_key: ForeignKey | None = None


class TableDefinition(BaseModel):
    """Table definition: columns, primary key and storage options."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    columns: tuple[ColumnSpec, ...]
    primary_key: tuple[str, ...]
    table_options: str = DEFAULT_TABLE_OPTIONS

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: tuple[ColumnSpec, ...]) -> tuple[ColumnSpec, ...]:
        """Require at least one column."""
        if not v:
            raise ValueError("at least one column is required")
        return v

    @field_validator("primary_key")
    @classmethod
    def validate_primary_key(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Require a non-empty primary key."""
        if not v:
            raise ValueError("primary key must name at least one column")
        return v

    @property
    def unique_columns(self) -> list[ColumnSpec]:
        """Columns flagged unique, in definition order."""
        return [column for column in self.columns if column.unique]


def to_column_spec(column: ColumnSpec | dict[str, Any]) -> ColumnSpec:
    """Coerce a column given as a dictionary into a ColumnSpec.

    Raises:
        ValidationError: If the column definition is malformed
    """
    if isinstance(column, ColumnSpec):
        return column
    try:
        return ColumnSpec.model_validate(column)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid column definition {column!r}: {e}") from e


def to_table_definition(
    name: str,
    columns: Sequence[ColumnSpec | dict[str, Any]],
    primary_key: Sequence[str],
    table_options: str | None = None,
) -> TableDefinition:
    """Build a TableDefinition, converting pydantic errors to ValidationError."""
    specs = tuple(to_column_spec(column) for column in columns)
    keys = (primary_key,) if isinstance(primary_key, str) else tuple(primary_key)
    data: dict[str, Any] = {
        "name": name,
        "columns": specs,
        "primary_key": keys,
    }
    if table_options is not None:
        data["table_options"] = table_options

    try:
        return TableDefinition.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid definition for table {name!r}: {e}") from e
