from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

import pytest

from laundry_ops.auth.session import Session, encode_session, hash_password, legacy_hash
from laundry_ops.container import build_services
from laundry_ops.core.constants import SESSION_COOKIE_NAME
from laundry_ops.core.enums import Role
from laundry_ops.core.exceptions import StoreError
from laundry_ops.database.store import EQ, IN, IS_NULL, Query
from laundry_ops.main import create_app

TODAY = date(2024, 3, 10)


class InMemoryRecordStore:
    """Dict-backed stand-in for the MySQL store, with the same query semantics."""

    def __init__(self, tables: Optional[Dict[str, List[dict]]] = None):
        self.tables: Dict[str, List[dict]] = {k: [dict(r) for r in v] for k, v in (tables or {}).items()}
        self.queries: List[Query] = []
        self.failing: set = set()

    def _check(self, collection: str) -> None:
        if collection in self.failing:
            raise StoreError(f"{collection} unavailable")

    @staticmethod
    def _matches(row: Mapping[str, Any], query: Query) -> bool:
        for f in query.filters:
            value = row.get(f.column)
            if f.op == IS_NULL or (f.op == EQ and f.value is None):
                if value is not None:
                    return False
            elif f.op == EQ:
                if value != f.value:
                    return False
            elif f.op == IN:
                if value not in f.value:
                    return False
        return True

    def _select(self, query: Query) -> List[dict]:
        self._check(query.collection)
        self.queries.append(query)
        rows = [r for r in self.tables.get(query.collection, []) if self._matches(r, query)]
        for column, descending in reversed(query.ordering):
            rows.sort(key=lambda r: (r.get(column) is None, str(r.get(column))), reverse=descending)
        if query.bounds:
            start, end = query.bounds
            rows = rows[start : end + 1]
        if query.columns:
            return [{c: r.get(c) for c in query.columns} for r in rows]
        return [dict(r) for r in rows]

    def fetch(self, query: Query) -> List[Dict[str, Any]]:
        return self._select(query)

    def fetch_one(self, query: Query) -> Optional[Dict[str, Any]]:
        rows = self._select(query)
        return rows[0] if rows else None

    def count(self, query: Query) -> int:
        self._check(query.collection)
        self.queries.append(query)
        return sum(1 for r in self.tables.get(query.collection, []) if self._matches(r, query))

    def insert(self, collection: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        self._check(collection)
        row = dict(values)
        row.setdefault("id", str(uuid.uuid4()))
        table = self.tables.setdefault(collection, [])
        if collection == "dashboard_users":
            for r in table:
                if r.get("email") == row.get("email") and r.get("outlet_id") == row.get("outlet_id"):
                    raise StoreError("Duplicate entry", StoreError.DUPLICATE)
        table.append(row)
        return dict(row)

    def update(self, query: Query, values: Mapping[str, Any]) -> int:
        self._check(query.collection)
        matched = [r for r in self.tables.get(query.collection, []) if self._matches(r, query)]
        for r in matched:
            r.update(values)
        return len(matched)

    def row(self, collection: str, row_id: str) -> Optional[dict]:
        return next((r for r in self.tables.get(collection, []) if r.get("id") == row_id), None)


def _ts(days_ago: int, hour: int = 10) -> datetime:
    return datetime.combine(TODAY - timedelta(days=days_ago), datetime.min.time()) + timedelta(hours=hour)


def demo_tables() -> Dict[str, List[dict]]:
    return {
        "outlets": [
            {"id": "o1", "outlet_name": "Andheri", "city": "Mumbai", "is_active": True,
             "electricity_usage_kwh": "120.5", "detergent_usage_kg": 8},
            {"id": "o2", "outlet_name": "Bandra", "city": "Mumbai", "is_active": True,
             "electricity_usage_kwh": None, "detergent_usage_kg": "n/a"},
            {"id": "o3", "outlet_name": "Colaba", "city": None, "is_active": False,
             "electricity_usage_kwh": None, "detergent_usage_kg": None},
        ],
        "customers": [
            {"id": "c1", "full_name": "Asha Rao"},
            {"id": "c2", "full_name": "Vikram Shah"},
            {"id": "c3", "full_name": "Neha Iyer"},
        ],
        "orders": [
            {"id": "ord1", "order_number": "LO-1001", "customer_id": "c1", "outlet_id": "o1", "status": "Delivered",
             "priority_type": "express", "total_price": 100, "payment_status": "paid", "created_at": _ts(2)},
            {"id": "ord2", "order_number": "LO-1002", "customer_id": "c2", "outlet_id": "o1", "status": "Received",
             "priority_type": "standard", "total_price": "250", "payment_status": "pending", "created_at": _ts(1)},
            {"id": "ord3", "order_number": "LO-1003", "customer_id": "c1", "outlet_id": "o1", "status": "In Progress",
             "priority_type": "standard", "total_price": 50.0, "payment_status": None, "created_at": _ts(0)},
            {"id": "ord4", "order_number": "LO-1004", "customer_id": "c3", "outlet_id": "o2", "status": "Cancelled",
             "priority_type": "express", "total_price": 80, "payment_status": "refunded", "created_at": _ts(9)},
        ],
        "staff": [
            {"id": "s1", "full_name": "Ravi", "role": "washer", "outlet_id": "o1", "phone_number": "98200", "is_active": True},
            {"id": "s2", "full_name": "Meera", "role": "ironer", "outlet_id": "o2", "phone_number": None, "is_active": True},
        ],
        "feedback": [
            {"id": "f1", "order_id": "ord1", "rating": 5, "category": "service", "comment": "Great",
             "created_at": _ts(2)},
            {"id": "f2", "order_id": "ord2", "rating": 4, "category": None, "comment": None, "created_at": _ts(1)},
            {"id": "f3", "order_id": "ord4", "rating": 1, "category": "delay", "comment": "Late", "created_at": _ts(8)},
        ],
        "dashboard_users": [
            {"id": "u-owner", "email": "owner@laundryops.local", "password_hash": hash_password("owner123"),
             "role": "owner", "outlet_id": None, "status": "approved", "created_at": _ts(30)},
            {"id": "u-mgr", "email": "manager@laundryops.local", "password_hash": legacy_hash("manager123"),
             "role": "manager", "outlet_id": "o1", "status": "approved", "created_at": _ts(20)},
            {"id": "u-pending", "email": "new@laundryops.local", "password_hash": hash_password("secret1"),
             "role": "manager", "outlet_id": "o2", "status": "pending", "created_at": _ts(1)},
            {"id": "u-rejected", "email": "gone@laundryops.local", "password_hash": hash_password("secret1"),
             "role": "owner", "outlet_id": None, "status": "rejected", "created_at": _ts(5)},
        ],
    }


OWNER = Session(role=Role.OWNER, email="owner@laundryops.local")
MANAGER = Session(role=Role.MANAGER, email="manager@laundryops.local", outlet_id="o1", outlet_name="Andheri")


@pytest.fixture
def store():
    return InMemoryRecordStore(demo_tables())


@pytest.fixture
def services(store):
    return build_services(store)


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def manager():
    return MANAGER


@pytest.fixture
def app(services):
    return create_app("laundry_ops.config.testing", container=services)


@pytest.fixture
def client(app):
    return app.test_client()


def _sign_in(client, session: Session) -> None:
    client.set_cookie(SESSION_COOKIE_NAME, encode_session(session))


@pytest.fixture
def sign_in():
    return _sign_in


@pytest.fixture
def owner_client(client):
    _sign_in(client, OWNER)
    return client


@pytest.fixture
def manager_client(client):
    _sign_in(client, MANAGER)
    return client
