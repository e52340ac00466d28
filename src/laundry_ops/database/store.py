"""Generic access to the named record collections.

Services build a :class:`Query` and hand it to a :class:`RecordStore`; the
store decides how to run it (MySQL in production, in-memory in tests).
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.exceptions import StoreError

COLLECTIONS = frozenset({"outlets", "orders", "customers", "staff", "feedback", "dashboard_users"})

EQ = "eq"
IN = "in"
IS_NULL = "is_null"


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any = None


@dataclass(frozen=True)
class Query:
    collection: str
    columns: Tuple[str, ...] = ()
    filters: Tuple[Filter, ...] = ()
    ordering: Tuple[Tuple[str, bool], ...] = ()
    bounds: Optional[Tuple[int, int]] = None

    def __post_init__(self):
        if self.collection not in COLLECTIONS:
            raise StoreError(f"Unknown collection: {self.collection!r}")

    def select(self, *columns: str) -> "Query":
        return replace(self, columns=tuple(columns))

    def eq(self, column: str, value: Any) -> "Query":
        return replace(self, filters=self.filters + (Filter(column, EQ, value),))

    def in_(self, column: str, values: Sequence[Any]) -> "Query":
        # An empty list matches nothing; stores must not widen it to "all rows".
        return replace(self, filters=self.filters + (Filter(column, IN, tuple(values)),))

    def is_null(self, column: str) -> "Query":
        return replace(self, filters=self.filters + (Filter(column, IS_NULL),))

    def order(self, column: str, *, descending: bool = False) -> "Query":
        return replace(self, ordering=self.ordering + ((column, descending),))

    def range(self, start: int, end: int) -> "Query":
        """Restrict to rows ``start``..``end`` (inclusive offsets)."""
        if start < 0 or end < start:
            raise StoreError(f"Invalid range {start}..{end}")
        return replace(self, bounds=(start, end))

    def scoped(self, column: str, outlet_id: Optional[str]) -> "Query":
        """Apply the outlet scope when there is one."""
        return self.eq(column, outlet_id) if outlet_id else self


class RecordStore(Protocol):
    """Repository-style interface the services depend on."""

    def fetch(self, query: Query) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def fetch_one(self, query: Query) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def count(self, query: Query) -> int:
        raise NotImplementedError

    def insert(self, collection: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def update(self, query: Query, values: Mapping[str, Any]) -> int:
        """Apply ``values`` to every row matching ``query``; returns the matched row count."""
        raise NotImplementedError
