from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from ..auth.session import Session, effective_outlet_id
from ..common.datetime_utils import iso_day, last_n_days, today
from ..common.numbers import as_number
from ..core.constants import EXPRESS_PRIORITY, RECENT_ORDERS_LIMIT, TREND_DAYS
from ..database.store import Query, RecordStore
from .model import Overview, TrendPoint


def build_trend(orders: List[dict], *, end: date, days: int = TREND_DAYS) -> List[TrendPoint]:
    """Orders/revenue per calendar day for the ``days`` days ending at ``end``."""
    buckets: Dict[str, Dict[str, float]] = {d: {"orders": 0, "revenue": 0.0} for d in last_n_days(days, end=end)}
    for o in orders:
        bucket = buckets.get(iso_day(o.get("created_at")))
        if bucket is None:
            continue
        bucket["orders"] += 1
        bucket["revenue"] += as_number(o.get("total_price"))
    return [TrendPoint(date=d, orders=int(b["orders"]), revenue=b["revenue"]) for d, b in sorted(buckets.items())]


def status_breakdown(orders: List[dict]) -> List[dict]:
    counts: Dict[str, int] = {}
    for o in orders:
        counts[o.get("status")] = counts.get(o.get("status"), 0) + 1
    return [{"name": name, "value": value} for name, value in counts.items()]


def outlet_breakdown(outlets: List[dict], orders: List[dict]) -> List[dict]:
    """Orders and revenue per outlet, active outlets only."""
    by_outlet: Dict[str, Dict[str, float]] = {}
    for o in orders:
        s = by_outlet.setdefault(o.get("outlet_id"), {"orders": 0, "revenue": 0.0})
        s["orders"] += 1
        s["revenue"] += as_number(o.get("total_price"))
    chart = []
    for outlet in outlets:
        # Rows without the flag count as active.
        if outlet.get("is_active") is not None and not outlet.get("is_active"):
            continue
        s = by_outlet.get(outlet["id"], {"orders": 0, "revenue": 0.0})
        chart.append({"name": outlet.get("outlet_name"), "orders": int(s["orders"]), "revenue": round(s["revenue"], 2)})
    return chart


class OverviewService:
    """Assembles the KPIs and charts of the overview page."""

    def __init__(self, store: RecordStore):
        self._store = store

    def build(self, session: Optional[Session], *, on: Optional[date] = None) -> Overview:
        outlet_id = effective_outlet_id(session)

        outlets = self._store.fetch(
            Query("outlets").select("id", "outlet_name", "is_active").scoped("id", outlet_id).order("outlet_name")
        )
        orders = self._store.fetch(
            Query("orders")
            .select("id", "order_number", "outlet_id", "customer_id", "status", "total_price", "created_at", "priority_type")
            .scoped("outlet_id", outlet_id)
            .order("created_at")
        )
        staff_count = self._store.count(Query("staff").scoped("outlet_id", outlet_id))

        if outlet_id:
            order_ids = [o["id"] for o in orders]
            if order_ids:
                customers = {o.get("customer_id") for o in orders if o.get("customer_id")}
                total_customers = len(customers)
                total_feedback = self._store.count(Query("feedback").in_("order_id", order_ids))
            else:
                total_customers = 0
                total_feedback = 0
        else:
            total_customers = self._store.count(Query("customers"))
            total_feedback = self._store.count(Query("feedback"))

        return Overview(
            total_orders=len(orders),
            total_revenue=sum(as_number(o.get("total_price")) for o in orders),
            total_customers=total_customers,
            total_feedback=total_feedback,
            outlets_count=len(outlets),
            staff_count=staff_count,
            express_count=sum(1 for o in orders if o.get("priority_type") == EXPRESS_PRIORITY),
            outlet_chart=outlet_breakdown(outlets, orders),
            status_chart=status_breakdown(orders),
            trend=build_trend(orders, end=on or today()),
            recent_orders=list(reversed(orders[-RECENT_ORDERS_LIMIT:])),
            outlets=outlets,
        )
