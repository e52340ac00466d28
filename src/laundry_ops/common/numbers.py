from __future__ import annotations

from typing import Any, Optional


def optional_number(value: Any) -> Optional[float]:
    """Float value of a numeric column, or None when blank/non-numeric."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def as_number(value: Any) -> float:
    """Like ``optional_number`` but missing values count as 0 in sums."""
    number = optional_number(value)
    return number if number is not None else 0.0
