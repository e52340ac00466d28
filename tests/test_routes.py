from __future__ import annotations

from laundry_ops.auth.service import INVALID_OWNER_LOGIN, PENDING_MESSAGE
from laundry_ops.auth.session import decode_session
from laundry_ops.core.constants import SESSION_COOKIE_NAME
from laundry_ops.main import create_app


def _cookie(client):
    cookie = client.get_cookie(SESSION_COOKIE_NAME)
    return decode_session(cookie.value) if cookie else None


def test_protected_pages_redirect_to_login(client):
    for path in ["/", "/outlets", "/orders", "/staff", "/staff/s1/edit", "/feedback", "/pending-requests"]:
        resp = client.get(path)
        assert resp.status_code == 302, path
        assert resp.headers["Location"].endswith("/login")


def test_login_page_lists_outlets(client):
    resp = client.get("/login")
    assert resp.status_code == 200
    assert b"Andheri" in resp.data
    assert b"Register here" in resp.data


def test_owner_login_sets_session_cookie(client):
    resp = client.post(
        "/login", data={"role": "owner", "email": "owner@laundryops.local", "password": "owner123"}
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")

    header = resp.headers["Set-Cookie"]
    assert header.startswith(f"{SESSION_COOKIE_NAME}=")
    assert "HttpOnly" in header
    assert "SameSite=Lax" in header
    assert "Max-Age=86400" in header
    assert _cookie(client).email == "owner@laundryops.local"


def test_login_errors_render_inline(client):
    resp = client.post("/login", data={"role": "owner", "email": "owner@laundryops.local", "password": "bad"})
    assert resp.status_code == 200
    assert INVALID_OWNER_LOGIN.encode() in resp.data
    assert _cookie(client) is None

    resp = client.post(
        "/login",
        data={"role": "manager", "email": "new@laundryops.local", "password": "secret1", "outlet_id": "o2"},
    )
    assert PENDING_MESSAGE.encode() in resp.data


def test_signed_in_users_skip_login_and_register(owner_client):
    assert owner_client.get("/login").status_code == 302
    assert owner_client.get("/register").status_code == 302


def test_register_then_duplicate(client):
    data = {"role": "manager", "email": "m@x.com", "password": "secret1", "outlet_id": "o1"}
    resp = client.post("/register", data=data)
    assert resp.status_code == 200
    assert b"Request submitted" in resp.data

    resp = client.post("/register", data=data)
    assert b"This email (and outlet) is already registered." in resp.data


def test_logout_clears_cookie(owner_client):
    resp = owner_client.post("/logout")
    assert resp.headers["Location"].endswith("/login")
    assert _cookie(owner_client) is None
    assert owner_client.get("/").status_code == 302


def test_owner_overview(owner_client):
    resp = owner_client.get("/")
    assert resp.status_code == 200
    assert b"Bandra" in resp.data
    assert b"Pending requests" in resp.data


def test_manager_overview_is_scoped(manager_client):
    resp = manager_client.get("/")
    assert resp.status_code == 200
    assert b"Andheri" in resp.data
    assert b"Bandra" not in resp.data
    assert b"Pending requests" not in resp.data


def test_owner_selects_outlet(owner_client):
    resp = owner_client.post("/select-outlet", data={"outlet_id": "o2", "redirect": "/orders"})
    assert resp.headers["Location"].endswith("/orders")
    assert _cookie(owner_client).selected_outlet_id == "o2"

    body = owner_client.get("/orders").data
    assert b"LO-1004" in body
    assert b"LO-1001" not in body

    owner_client.post("/select-outlet", data={"outlet_id": "", "redirect": "https://evil.example/"})
    assert _cookie(owner_client).selected_outlet_id is None


def test_select_outlet_rejects_foreign_redirects(owner_client):
    resp = owner_client.post("/select-outlet", data={"outlet_id": "o1", "redirect": "//evil.example/x"})
    assert resp.headers["Location"] in ("/", "http://localhost/")


def test_manager_cannot_switch_outlet(manager_client):
    manager_client.post("/select-outlet", data={"outlet_id": "o2", "redirect": "/orders"})
    assert b"LO-1004" not in manager_client.get("/orders").data


def test_order_status_update(manager_client, store):
    resp = manager_client.post("/orders/ord2/status", data={"status": "Ready", "page": "1"})
    assert resp.status_code == 302
    assert store.row("orders", "ord2")["status"] == "Ready"

    resp = manager_client.post("/orders/ord4/status", data={"status": "Delivered"})
    assert resp.status_code == 404
    assert store.row("orders", "ord4")["status"] == "Cancelled"

    manager_client.post("/orders/ord1/status", data={"status": "Lost"})
    assert b"Unknown order status" in manager_client.get("/orders").data


def test_outlet_toggle_scope(manager_client, store):
    assert manager_client.post("/outlets/o2/active", data={"is_active": "false"}).status_code == 403
    assert store.row("outlets", "o2")["is_active"] is True

    resp = manager_client.post("/outlets/o1/active", data={"is_active": "false", "page": "1"})
    assert resp.status_code == 302
    assert store.row("outlets", "o1")["is_active"] is False


def test_staff_pages(manager_client, store):
    assert b"Ravi" in manager_client.get("/staff").data

    resp = manager_client.post("/staff", data={"full_name": "Sunil", "role": "washer", "phone_number": ""})
    assert resp.status_code == 302
    added = [r for r in store.tables["staff"] if r["full_name"] == "Sunil"]
    assert added and added[0]["outlet_id"] == "o1"

    manager_client.post("/staff", data={"full_name": "Bad", "role": "chef"})
    assert b"Role must be one of" in manager_client.get("/staff").data

    assert manager_client.get("/staff/s2/edit").status_code == 404
    assert manager_client.get("/staff/s1/edit").status_code == 200

    resp = manager_client.post("/staff/s1/edit", data={"full_name": "Ravi K", "role": "ironer"})
    assert resp.status_code == 302
    assert store.row("staff", "s1")["full_name"] == "Ravi K"

    manager_client.post("/staff/s1/active", data={"is_active": "false"})
    assert store.row("staff", "s1")["is_active"] is False


def test_feedback_page(owner_client):
    resp = owner_client.get("/feedback")
    assert resp.status_code == 200
    assert b"3.3 / 5" in resp.data


def test_pending_requests_are_owner_only(owner_client, store, sign_in, manager):
    resp = owner_client.get("/pending-requests")
    assert b"new@laundryops.local" in resp.data

    resp = owner_client.post("/pending-requests/u-pending/approve")
    assert resp.headers["Location"].endswith("/pending-requests")
    assert store.row("dashboard_users", "u-pending")["status"] == "approved"

    sign_in(owner_client, manager)
    assert owner_client.get("/pending-requests").status_code == 302
    assert owner_client.post("/pending-requests/u-rejected/approve").status_code == 403


def test_store_failure_shows_message(owner_client, store):
    store.failing.add("orders")
    resp = owner_client.get("/orders")
    assert resp.status_code == 200
    assert b"Could not load orders." in resp.data

    resp = owner_client.get("/")
    assert b"Could not load the dashboard." in resp.data


def test_unconfigured_store_renders_warning():
    app = create_app("laundry_ops.config.testing")
    resp = app.test_client().get("/login")
    assert resp.status_code == 503
    assert b"Dashboard is not configured" in resp.data


def test_unknown_page(owner_client):
    assert owner_client.get("/nope").status_code == 404


def test_secure_cookie_when_configured(app, client):
    app.config["SESSION_COOKIE_SECURE"] = True
    resp = client.post(
        "/login", data={"role": "owner", "email": "owner@laundryops.local", "password": "owner123"}
    )
    assert "Secure" in resp.headers["Set-Cookie"]
