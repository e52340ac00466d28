from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.pagination import Page, parse_page
from ..container import Container
from ..core.constants import STAFF_PAGE_SIZE
from ..core.exceptions import StoreError, ValidationError
from ..web import current_scope, current_session
from .model import STAFF_ROLES

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _outlet_options():
        try:
            return container.staff_service.outlet_options(current_scope())
        except StoreError:
            logger.exception("Could not load outlet options")
            return []

    @app.route("/staff", endpoint="staff")
    def staff():
        error = None
        try:
            page = container.staff_service.list_page(current_session(), parse_page(request.args.get("page")))
        except StoreError:
            logger.exception("Could not load staff")
            error = "Could not load staff."
            page = Page.empty(STAFF_PAGE_SIZE)
        return render_template(
            "staff.html",
            page=page,
            error=error,
            roles=STAFF_ROLES,
            outlets=_outlet_options(),
            active_page="staff",
        )

    @app.route("/staff", methods=["POST"], endpoint="add_staff")
    def add_staff():
        try:
            container.staff_service.add(
                current_session(),
                full_name=request.form.get("full_name"),
                role=request.form.get("role"),
                outlet_id=request.form.get("outlet_id"),
                phone_number=request.form.get("phone_number"),
            )
            flash("Staff member added.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            logger.exception("Could not add staff")
            flash(f"Could not add staff member: {e}", "danger")
        return redirect(url_for("staff"))

    @app.route("/staff/<staff_id>/edit", methods=["GET", "POST"], endpoint="edit_staff")
    def edit_staff(staff_id: str):
        try:
            member = container.staff_service.get(current_session(), staff_id)
        except StoreError:
            logger.exception("Could not load staff %s", staff_id)
            return render_template(
                "staff_edit.html", member=None, error="Could not load staff member.", active_page="staff"
            )

        if request.method == "POST":
            try:
                container.staff_service.update(
                    current_session(),
                    staff_id,
                    full_name=request.form.get("full_name"),
                    role=request.form.get("role"),
                    outlet_id=request.form.get("outlet_id"),
                    phone_number=request.form.get("phone_number"),
                )
                flash("Staff member updated.", "success")
                return redirect(url_for("staff"))
            except ValidationError as e:
                flash(str(e), "danger")
            except StoreError as e:
                logger.exception("Could not update staff %s", staff_id)
                flash(f"Could not update staff member: {e}", "danger")

        return render_template(
            "staff_edit.html",
            member=member,
            roles=STAFF_ROLES,
            outlets=_outlet_options(),
            active_page="staff",
        )

    @app.route("/staff/<staff_id>/active", methods=["POST"], endpoint="set_staff_active")
    def set_staff_active(staff_id: str):
        is_active = request.form.get("is_active") == "true"
        try:
            container.staff_service.set_active(current_session(), staff_id, is_active)
        except StoreError as e:
            logger.exception("Could not update staff %s", staff_id)
            flash(f"Could not update staff member: {e}", "danger")
        return redirect(url_for("staff", page=parse_page(request.form.get("page"))))
