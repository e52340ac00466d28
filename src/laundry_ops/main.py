from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_owner, list_tables
from .database.connection import DBConfig
from . import web
from .auth.controller import register as register_auth
from .dashboard.controller import register as register_dashboard
from .feedback.controller import register as register_feedback
from .orders.controller import register as register_orders
from .outlets.controller import register as register_outlets
from .staff.controller import register as register_staff

REPO_ROOT = Path(__file__).resolve().parents[2]

logger = logging.getLogger("laundry_ops")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings_module: Optional[str] = None, *, container: Optional[Container] = None) -> Flask:
    """Application factory.

    ``container`` lets callers (tests) inject services wired to another store;
    otherwise services are built from the settings' database URL and key.
    """
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"), static_folder=str(REPO_ROOT / "static"))

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = DBConfig.from_settings(
            getattr(settings, "DATABASE_URL", ""), getattr(settings, "DATABASE_SERVICE_KEY", "")
        )
        if db_config is None:
            logger.warning("settings=%s: DATABASE_URL / DATABASE_SERVICE_KEY not set, serving maintenance page", settings_module)
        else:
            logger.info("settings=%s db=%s", settings_module, db_config.describe())
            _bootstrap(db_config, settings)
        container = build_container(db_config=db_config)

    web.install(app, container)
    register_auth(app, container)
    register_dashboard(app, container)
    register_outlets(app, container)
    register_orders(app, container)
    register_staff(app, container)
    register_feedback(app, container)

    return app


def _bootstrap(db_config: DBConfig, settings) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_owner(db_config)
        logger.info("demo seed ready")
