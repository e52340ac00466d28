from __future__ import annotations

import logging

from flask import Flask, render_template, request

from ..common.pagination import Page, parse_page
from ..container import Container
from ..core.constants import FEEDBACK_PAGE_SIZE
from ..core.exceptions import StoreError
from ..web import current_session

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/feedback", endpoint="feedback")
    def feedback():
        error = None
        try:
            page = container.feedback_service.list_page(current_session(), parse_page(request.args.get("page")))
        except StoreError:
            logger.exception("Could not load feedback")
            error = "Could not load feedback."
            page = Page.empty(FEEDBACK_PAGE_SIZE, average_rating=0.0)
        return render_template("feedback.html", page=page, error=error, active_page="feedback")
