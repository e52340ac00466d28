from __future__ import annotations

import logging
from typing import Optional

from ..auth.session import Session, effective_outlet_id
from ..common.lookup import attach, distinct_ids, fetch_lookup
from ..common.pagination import Page, clamp_page, page_bounds
from ..core.constants import ORDERS_PAGE_SIZE
from ..core.enums import OrderStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..database.store import Query, RecordStore

logger = logging.getLogger(__name__)

ORDER_COLUMNS = (
    "id",
    "order_number",
    "customer_id",
    "outlet_id",
    "status",
    "priority_type",
    "total_price",
    "payment_status",
    "created_at",
)
ORDER_STATUSES = [s.value for s in OrderStatus]


class OrderService:
    def __init__(self, store: RecordStore):
        self._store = store

    def list_page(self, session: Optional[Session], page: int = 1) -> Page[dict]:
        outlet_id = effective_outlet_id(session)
        scoped = Query("orders").scoped("outlet_id", outlet_id)

        total = self._store.count(scoped)
        if total == 0:
            return Page.empty(ORDERS_PAGE_SIZE)
        page = clamp_page(page, total, ORDERS_PAGE_SIZE)

        rows = self._store.fetch(
            scoped.select(*ORDER_COLUMNS)
            .order("created_at", descending=True)
            .range(*page_bounds(page, ORDERS_PAGE_SIZE))
        )
        outlets = fetch_lookup(self._store, "outlets", distinct_ids(rows, "outlet_id"), "outlet_name")
        customers = fetch_lookup(self._store, "customers", distinct_ids(rows, "customer_id"), "full_name")
        items = attach(attach(rows, outlets, "outlet_id", "outlet_name"), customers, "customer_id", "customer_name")
        return Page(items=items, total=total, page=page, page_size=ORDERS_PAGE_SIZE)

    def update_status(self, session: Optional[Session], order_id: Optional[str], status: Optional[str]) -> None:
        status = (status or "").strip()
        if not order_id or not status:
            raise ValidationError("Missing order or status")
        if session is None:
            raise AuthorizationError("Unauthorized")
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Unknown order status: {status}")

        query = Query("orders").eq("id", order_id).scoped("outlet_id", effective_outlet_id(session))
        if not self._store.update(query, {"status": status}):
            raise NotFoundError("Order not found or not in your outlet")
        logger.info("Order %s status -> %s by %s", order_id, status, session.email)
