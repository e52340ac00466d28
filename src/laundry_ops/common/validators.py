from __future__ import annotations

from typing import Iterable, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required.")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters.")
    return value


def require_choice(value: Optional[str], choices: Iterable[str], message: str) -> str:
    v = (value or "").strip()
    if v not in set(choices):
        raise ValidationError(message)
    return v


def optional_text(value: Optional[str]) -> Optional[str]:
    """Blank form values are stored as NULL."""
    v = (value or "").strip()
    return v or None
