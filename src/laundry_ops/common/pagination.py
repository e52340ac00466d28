from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


def total_pages_for(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


def parse_page(raw: Optional[str]) -> int:
    """Page number from a query string; anything unusable means page 1."""
    try:
        page = int(raw or 1)
    except (TypeError, ValueError):
        return 1
    return max(1, page)


def clamp_page(page: int, total: int, page_size: int) -> int:
    return min(max(1, page), total_pages_for(total, page_size))


def page_bounds(page: int, page_size: int) -> Tuple[int, int]:
    """Inclusive row offsets for ``page``."""
    start = (page - 1) * page_size
    return start, start + page_size - 1


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int
    extra: dict = field(default_factory=dict)

    @classmethod
    def empty(cls, page_size: int, **extra: Any) -> "Page[T]":
        return cls(items=[], total=0, page=1, page_size=page_size, extra=dict(extra))

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
