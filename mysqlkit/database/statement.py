"""Statements and query outcomes."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from mysqlkit.types import RowType


@dataclass(frozen=True)
class Statement:
    """SQL text plus its bound parameters, in placeholder order."""

    sql: str
    params: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers but keep the statement immutable
        if not isinstance(self.params, tuple):
            object.__setattr__(self, "params", tuple(self.params))


@dataclass(frozen=True)
class QueryMetadata:
    """Row counters reported by the driver; zero when not reported."""

    changed_rows: int = 0
    affected_rows: int = 0
    insert_id: int = 0
    length: int = 0


@dataclass(frozen=True)
class QueryOutcome:
    """Rows returned by a statement together with its metadata."""

    rows: list[RowType] = field(default_factory=list)
    meta: QueryMetadata = field(default_factory=QueryMetadata)

    def __iter__(self) -> Iterator[Any]:
        """Allow ``rows, meta = outcome`` unpacking."""
        yield self.rows
        yield self.meta
