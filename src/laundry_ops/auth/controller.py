from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, StoreError, ValidationError
from ..web import clear_session, current_session, owner_required, safe_redirect_target, store_session

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _outlet_options():
        try:
            return container.outlet_service.options()
        except StoreError:
            logger.exception("Could not load outlets for the sign-in form")
            return []

    def _form_values():
        return {
            "role": request.form.get("role", Role.OWNER.value),
            "email": request.form.get("email", ""),
            "outlet_id": request.form.get("outlet_id", ""),
        }

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if current_session():
            return redirect(url_for("overview"))

        error = None
        if request.method == "POST":
            try:
                session = container.auth_service.login(
                    role=request.form.get("role"),
                    email=request.form.get("email"),
                    password=request.form.get("password"),
                    outlet_id=request.form.get("outlet_id"),
                )
                return store_session(redirect(url_for("overview")), session)
            except (ValidationError, AuthenticationError) as e:
                error = str(e)
            except StoreError:
                logger.exception("Login failed")
                error = "Could not sign in right now. Please try again."

        return render_template(
            "login.html",
            outlets=_outlet_options(),
            error=error,
            form=_form_values(),
            roles=[r.value for r in Role],
        )

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_account():
        if current_session():
            return redirect(url_for("overview"))

        error = None
        success = False
        if request.method == "POST":
            try:
                container.registration_service.register(
                    role=request.form.get("role"),
                    email=request.form.get("email"),
                    password=request.form.get("password"),
                    outlet_id=request.form.get("outlet_id"),
                )
                success = True
            except ValidationError as e:
                error = str(e)
            except StoreError as e:
                logger.exception("Registration failed")
                error = str(e)

        return render_template(
            "register.html",
            outlets=_outlet_options(),
            error=error,
            success=success,
            form=_form_values(),
            roles=[r.value for r in Role],
        )

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        return clear_session(redirect(url_for("login")))

    @app.route("/select-outlet", methods=["POST"], endpoint="select_outlet")
    def select_outlet():
        session = current_session()
        target = safe_redirect_target(request.form.get("redirect"))
        if not session.is_owner:
            return redirect(target)
        updated = session.select_outlet((request.form.get("outlet_id") or "").strip() or None)
        return store_session(redirect(target), updated)

    @app.route("/pending-requests", endpoint="pending_requests")
    @owner_required
    def pending_requests():
        error = None
        requests_ = []
        try:
            requests_ = container.registration_service.list_pending(current_session())
        except StoreError:
            logger.exception("Could not load pending requests")
            error = "Could not load pending requests."
        return render_template(
            "pending_requests.html", requests=requests_, error=error, active_page="pending_requests"
        )

    @app.route("/pending-requests/<user_id>/approve", methods=["POST"], endpoint="approve_request")
    def approve_request(user_id: str):
        try:
            if container.registration_service.approve(current_session(), user_id):
                flash("Request approved. The user can now sign in.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            logger.exception("Could not approve %s", user_id)
            flash(f"Could not approve request: {e}", "danger")
        return redirect(url_for("pending_requests"))

    @app.route("/pending-requests/<user_id>/reject", methods=["POST"], endpoint="reject_request")
    def reject_request(user_id: str):
        try:
            if container.registration_service.reject(current_session(), user_id):
                flash("Request rejected.", "warning")
        except ValidationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            logger.exception("Could not reject %s", user_id)
            flash(f"Could not reject request: {e}", "danger")
        return redirect(url_for("pending_requests"))
