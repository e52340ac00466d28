"""Request plumbing shared by the controllers: session cookie, route guard, error pages."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Optional
from urllib.parse import urlsplit

from flask import Flask, current_app, g, redirect, render_template, request, url_for

from .auth.session import Session, decode_session, effective_outlet_id, encode_session
from .common.datetime_utils import format_timestamp
from .core.constants import SESSION_COOKIE_NAME, SESSION_MAX_AGE_SECONDS
from .core.exceptions import AuthorizationError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

PUBLIC_ENDPOINTS = frozenset({"login", "register", "static"})


def current_session() -> Optional[Session]:
    return g.get("dashboard_session")


def current_scope() -> Optional[str]:
    return effective_outlet_id(current_session())


def store_session(response, session: Session):
    response.set_cookie(
        SESSION_COOKIE_NAME,
        encode_session(session),
        max_age=SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        samesite="Lax",
        secure=bool(current_app.config.get("SESSION_COOKIE_SECURE")) or request.is_secure,
    )
    return response


def clear_session(response):
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response


def safe_redirect_target(value: Optional[str], default: str = "/") -> str:
    """Only same-site absolute paths are accepted as redirect targets."""
    target = (value or "").strip()
    if not target.startswith("/") or target.startswith("//") or urlsplit(target).netloc:
        return default
    return target


def owner_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        session = current_session()
        if session is None or not session.is_owner:
            return redirect(url_for("overview"))
        return view(*args, **kwargs)

    return wrapper


def install(app: Flask, container) -> None:
    """Session loading, route protection, template globals and error pages."""

    @app.before_request
    def load_session():
        g.dashboard_session = decode_session(request.cookies.get(SESSION_COOKIE_NAME))

        if request.endpoint == "static":
            return None
        if container is None:
            # No store credentials: every page degrades to the same warning.
            return render_template("unavailable.html"), 503
        if g.dashboard_session is None and request.endpoint not in PUBLIC_ENDPOINTS:
            return redirect(url_for("login"))
        return None

    app.add_template_filter(format_timestamp, "timestamp")

    @app.context_processor
    def inject_shell():
        session = current_session()
        outlet_choices = []
        if container is not None and session is not None and session.is_owner:
            try:
                outlet_choices = container.outlet_service.options()
            except StoreError:
                logger.exception("Could not load outlet selector")
        return {"current_session": session, "outlet_choices": outlet_choices}

    @app.errorhandler(AuthorizationError)
    def handle_forbidden(e):
        logger.warning("Forbidden %s %s: %s", request.method, request.path, e)
        return render_template("403.html", message=str(e)), 403

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return render_template("404.html", message=str(e)), 404

    @app.errorhandler(404)
    def handle_missing_page(e):
        return render_template("404.html", message="Page not found"), 404
