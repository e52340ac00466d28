from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.pagination import Page, parse_page
from ..container import Container
from ..core.constants import OUTLETS_PAGE_SIZE
from ..core.exceptions import StoreError, ValidationError
from ..web import current_session

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/outlets", endpoint="outlets")
    def outlets():
        error = None
        try:
            page = container.outlet_service.list_page(current_session(), parse_page(request.args.get("page")))
        except StoreError:
            logger.exception("Could not load outlets")
            error = "Could not load outlets."
            page = Page.empty(OUTLETS_PAGE_SIZE)
        return render_template("outlets.html", page=page, error=error, active_page="outlets")

    @app.route("/outlets/<outlet_id>/active", methods=["POST"], endpoint="set_outlet_active")
    def set_outlet_active(outlet_id: str):
        is_active = request.form.get("is_active") == "true"
        try:
            container.outlet_service.set_active(current_session(), outlet_id, is_active)
            flash("Outlet activated." if is_active else "Outlet set to maintenance.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            logger.exception("Could not update outlet %s", outlet_id)
            flash(f"Could not update outlet: {e}", "danger")
        return redirect(url_for("outlets", page=parse_page(request.form.get("page"))))
