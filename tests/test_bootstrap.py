from __future__ import annotations

from pathlib import Path

from laundry_ops.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use

DATABASE_DIR = Path(__file__).resolve().parents[1] / "database"


def test_splitter_keeps_semicolons_inside_quotes():
    sql = """
    -- comment; with a semicolon
    INSERT INTO feedback (id, comment) VALUES ('f1', 'late; again');
    INSERT INTO feedback (id, comment) VALUES ('f2', 'it\\'s fine')
    """
    statements = list(_iter_sql_statements(sql))
    assert len(statements) == 2
    assert statements[0].endswith("'late; again')")


def test_create_database_and_use_are_dropped():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE t (id INT);"
    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_defines_every_collection():
    schema = (DATABASE_DIR / "schema.sql").read_text(encoding="utf-8")
    statements = list(_iter_sql_statements(_strip_create_db_and_use(schema)))
    for table in ["outlets", "customers", "orders", "staff", "feedback", "dashboard_users"]:
        assert any(f"CREATE TABLE IF NOT EXISTS {table}" in s for s in statements), table
