from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, List, Optional


def today() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def last_n_days(n: int, *, end: date) -> List[str]:
    """ISO dates of the ``n`` days ending at ``end`` inclusive, ascending."""
    return [(end - timedelta(days=i)).isoformat() for i in range(n - 1, -1, -1)]


def iso_day(value: Any) -> Optional[str]:
    """Calendar date (YYYY-MM-DD) of a stored timestamp, whatever the driver returned."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def format_timestamp(value: Any) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    return str(value)[:16].replace("T", " ")
