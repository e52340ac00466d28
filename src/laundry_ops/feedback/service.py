from __future__ import annotations

from typing import List, Optional

from ..auth.session import Session, effective_outlet_id
from ..common.lookup import join_names
from ..common.pagination import Page, clamp_page, page_bounds
from ..core.constants import FEEDBACK_PAGE_SIZE
from ..database.store import Query, RecordStore

FEEDBACK_COLUMNS = ("id", "order_id", "rating", "category", "comment", "created_at")


def average_rating(rows: List[dict]) -> float:
    if not rows:
        return 0.0
    return sum(int(r.get("rating") or 0) for r in rows) / len(rows)


class FeedbackService:
    def __init__(self, store: RecordStore):
        self._store = store

    def list_page(self, session: Optional[Session], page: int = 1) -> Page[dict]:
        """Feedback for the caller's scope; ``extra['average_rating']`` covers every scoped row."""
        outlet_id = effective_outlet_id(session)
        scoped = Query("feedback")
        if outlet_id:
            order_ids = [o["id"] for o in self._store.fetch(Query("orders").select("id").eq("outlet_id", outlet_id))]
            if not order_ids:
                return Page.empty(FEEDBACK_PAGE_SIZE, average_rating=0.0)
            scoped = scoped.in_("order_id", order_ids)

        ratings = self._store.fetch(scoped.select("rating"))
        avg = average_rating(ratings)
        total = len(ratings)
        page = clamp_page(page, total, FEEDBACK_PAGE_SIZE)
        if total == 0:
            return Page.empty(FEEDBACK_PAGE_SIZE, average_rating=avg)

        rows = self._store.fetch(
            scoped.select(*FEEDBACK_COLUMNS).order("id", descending=True).range(*page_bounds(page, FEEDBACK_PAGE_SIZE))
        )
        items = join_names(
            self._store, rows, fk="order_id", collection="orders", value_column="order_number", as_name="order_number"
        )
        return Page(items=items, total=total, page=page, page_size=FEEDBACK_PAGE_SIZE, extra={"average_rating": avg})
