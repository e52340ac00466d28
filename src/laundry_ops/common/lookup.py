"""Application-side joins.

Pages fetch their primary rows first, then batch-fetch the referenced rows by
the foreign keys present on the page and merge them in memory.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from ..core.constants import EMPTY_DISPLAY
from ..database.store import Query, RecordStore


def distinct_ids(rows: Iterable[Mapping[str, Any]], key: str) -> List[Any]:
    seen: Dict[Any, None] = {}
    for row in rows:
        value = row.get(key)
        if value is not None and value != "":
            seen.setdefault(value, None)
    return list(seen)


def build_lookup(rows: Iterable[Mapping[str, Any]], key: str, value: str) -> Dict[Any, Any]:
    return {row[key]: row.get(value) for row in rows}


def fetch_lookup(store: RecordStore, collection: str, ids: Sequence[Any], value_column: str) -> Dict[Any, Any]:
    if not ids:
        return {}
    rows = store.fetch(Query(collection).select("id", value_column).in_("id", list(ids)))
    return build_lookup(rows, "id", value_column)


def attach(
    rows: Iterable[Mapping[str, Any]],
    lookup: Mapping[Any, Any],
    fk: str,
    as_name: str,
    default: Any = EMPTY_DISPLAY,
) -> List[dict]:
    out: List[dict] = []
    for row in rows:
        merged = dict(row)
        value = lookup.get(row.get(fk))
        merged[as_name] = value if value is not None else default
        out.append(merged)
    return out


def join_names(
    store: RecordStore,
    rows: Sequence[Mapping[str, Any]],
    *,
    fk: str,
    collection: str,
    value_column: str,
    as_name: str,
) -> List[dict]:
    """Decorate ``rows`` with one display value per referenced record."""
    lookup = fetch_lookup(store, collection, distinct_ids(rows, fk), value_column)
    return attach(rows, lookup, fk, as_name)
