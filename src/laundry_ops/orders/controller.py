from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.pagination import Page, parse_page
from ..container import Container
from ..core.constants import ORDERS_PAGE_SIZE
from ..core.exceptions import StoreError, ValidationError
from ..web import current_session
from .service import ORDER_STATUSES

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/orders", endpoint="orders")
    def orders():
        error = None
        try:
            page = container.order_service.list_page(current_session(), parse_page(request.args.get("page")))
        except StoreError:
            logger.exception("Could not load orders")
            error = "Could not load orders."
            page = Page.empty(ORDERS_PAGE_SIZE)
        return render_template(
            "orders.html", page=page, error=error, statuses=ORDER_STATUSES, active_page="orders"
        )

    @app.route("/orders/<order_id>/status", methods=["POST"], endpoint="update_order_status")
    def update_order_status(order_id: str):
        try:
            container.order_service.update_status(current_session(), order_id, request.form.get("status"))
        except ValidationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            logger.exception("Could not update order %s", order_id)
            flash(f"Could not update order: {e}", "danger")
        return redirect(url_for("orders", page=parse_page(request.form.get("page"))))
