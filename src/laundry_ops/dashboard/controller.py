from __future__ import annotations

import logging

from flask import Flask, render_template

from ..container import Container
from ..core.exceptions import StoreError
from ..dashboard.model import Overview
from ..web import current_session

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="overview")
    def overview():
        error = None
        try:
            data = container.overview_service.build(current_session())
        except StoreError:
            logger.exception("Could not load dashboard")
            error = "Could not load the dashboard."
            data = Overview()
        return render_template("overview.html", data=data, error=error, active_page="overview")
