from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from laundry_ops.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from laundry_ops.orders.service import ORDER_STATUSES, OrderService


def test_owner_orders_newest_first_with_names(store, owner):
    page = OrderService(store).list_page(owner)

    assert page.total == 4
    assert [o["order_number"] for o in page.items] == ["LO-1003", "LO-1002", "LO-1001", "LO-1004"]
    last = page.items[-1]
    assert last["customer_name"] == "Neha Iyer"
    assert last["outlet_name"] == "Bandra"


def test_manager_orders_are_scoped(store, manager):
    page = OrderService(store).list_page(manager)
    assert page.total == 3
    assert {o["outlet_id"] for o in page.items} == {"o1"}


def test_missing_customer_shows_placeholder(store, owner):
    store.tables["orders"].append(
        {"id": "ord9", "order_number": "LO-1009", "customer_id": None, "outlet_id": "o2", "status": "Ready",
         "total_price": 10, "created_at": datetime(2024, 3, 11)}
    )
    first = OrderService(store).list_page(owner).items[0]
    assert first["order_number"] == "LO-1009"
    assert first["customer_name"] == "—"


def test_page_beyond_the_end_is_clamped(store, owner):
    start = datetime(2024, 1, 1)
    store.tables["orders"] = [
        {"id": f"n{i}", "order_number": f"N-{i}", "outlet_id": "o1", "status": "Received",
         "total_price": 1, "created_at": start + timedelta(hours=i)}
        for i in range(23)
    ]
    page = OrderService(store).list_page(owner, page=4)
    assert page.page == 3
    assert page.total_pages == 3
    assert len(page.items) == 3
    assert not page.has_next


def test_outlet_without_orders_is_an_empty_page(store, owner):
    page = OrderService(store).list_page(owner.select_outlet("o3"))
    assert page.items == []
    assert page.total == 0


def test_update_status(store, owner, manager):
    service = OrderService(store)
    service.update_status(manager, "ord2", "Ready")
    assert store.row("orders", "ord2")["status"] == "Ready"

    service.update_status(owner, "ord4", "Out for Delivery")
    assert store.row("orders", "ord4")["status"] == "Out for Delivery"


def test_update_outside_scope_leaves_row_unchanged(store, manager):
    with pytest.raises(NotFoundError, match="Order not found or not in your outlet"):
        OrderService(store).update_status(manager, "ord4", "Delivered")
    assert store.row("orders", "ord4")["status"] == "Cancelled"


def test_update_status_rejects_bad_input(store, owner):
    service = OrderService(store)
    with pytest.raises(ValidationError):
        service.update_status(owner, "ord1", "Lost")
    with pytest.raises(ValidationError):
        service.update_status(owner, "", "Ready")
    with pytest.raises(AuthorizationError):
        service.update_status(None, "ord1", "Ready")
    assert len(ORDER_STATUSES) == 6
