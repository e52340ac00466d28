from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..auth.session import Session, effective_outlet_id
from ..common.numbers import as_number, optional_number
from ..common.pagination import Page, clamp_page, page_bounds
from ..core.constants import OUTLETS_PAGE_SIZE
from ..core.enums import COMPLETED_ORDER_STATUSES, OrderStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..database.store import Query, RecordStore
from .model import OutletCard

logger = logging.getLogger(__name__)

OUTLET_COLUMNS = ("id", "outlet_name", "is_active", "city", "electricity_usage_kwh", "detergent_usage_kg")


class OutletService:
    def __init__(self, store: RecordStore):
        self._store = store

    def options(self, outlet_id: Optional[str] = None) -> List[dict]:
        """Id/name pairs for outlet dropdowns, limited to the scope when given."""
        query = Query("outlets").select("id", "outlet_name").scoped("id", outlet_id).order("outlet_name")
        return self._store.fetch(query)

    def list_page(self, session: Optional[Session], page: int = 1) -> Page[OutletCard]:
        outlet_id = effective_outlet_id(session)
        base = Query("outlets").select(*OUTLET_COLUMNS).order("outlet_name")

        if outlet_id:
            rows = self._store.fetch(base.eq("id", outlet_id))
            total, page = len(rows), 1
            page_size = max(OUTLETS_PAGE_SIZE, total)
        else:
            total = self._store.count(Query("outlets"))
            page = clamp_page(page, total, OUTLETS_PAGE_SIZE)
            rows = self._store.fetch(base.range(*page_bounds(page, OUTLETS_PAGE_SIZE)))
            page_size = OUTLETS_PAGE_SIZE

        stats = self._order_stats([r["id"] for r in rows])
        cards = [
            OutletCard(
                id=r["id"],
                outlet_name=r.get("outlet_name") or "",
                is_active=bool(r.get("is_active")),
                city=r.get("city"),
                electricity_usage_kwh=optional_number(r.get("electricity_usage_kwh")),
                detergent_usage_kg=optional_number(r.get("detergent_usage_kg")),
                **stats.get(r["id"], {}),
            )
            for r in rows
        ]
        return Page(items=cards, total=total, page=page, page_size=page_size)

    def _order_stats(self, outlet_ids: List[str]) -> Dict[str, dict]:
        if not outlet_ids:
            return {}
        stats: Dict[str, dict] = {oid: {"orders": 0, "revenue": 0.0, "delivered": 0, "running": 0} for oid in outlet_ids}
        orders = self._store.fetch(
            Query("orders").select("outlet_id", "total_price", "status").in_("outlet_id", outlet_ids)
        )
        for o in orders:
            s = stats.get(o.get("outlet_id"))
            if s is None:
                continue
            s["orders"] += 1
            s["revenue"] += as_number(o.get("total_price"))
            status = o.get("status") or ""
            if status == OrderStatus.DELIVERED.value:
                s["delivered"] += 1
            if status not in COMPLETED_ORDER_STATUSES:
                s["running"] += 1
        return stats

    def set_active(self, session: Optional[Session], outlet_id: Optional[str], is_active: bool) -> None:
        if not outlet_id:
            raise ValidationError("Missing outlet")
        if session is None:
            raise AuthorizationError("Unauthorized")
        scope = effective_outlet_id(session)
        if scope and scope != outlet_id:
            raise AuthorizationError("Unauthorized")

        matched = self._store.update(Query("outlets").eq("id", outlet_id), {"is_active": bool(is_active)})
        if not matched:
            raise NotFoundError("Outlet not found")
        logger.info("Outlet %s set active=%s by %s", outlet_id, bool(is_active), session.email)
