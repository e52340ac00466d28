from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv

from laundry_ops.config import get_settings_module
from laundry_ops.database.bootstrap import apply_schema, list_tables
from laundry_ops.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = DBConfig.from_settings(settings.DATABASE_URL, settings.DATABASE_SERVICE_KEY)
    if db_config is None:
        raise SystemExit("DATABASE_URL and DATABASE_SERVICE_KEY must be set.")

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    print(f"OK: Applied schema.sql -> {db_config.describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
