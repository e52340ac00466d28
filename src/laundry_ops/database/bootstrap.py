from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..auth.session import hash_password
from ..core.enums import RegistrationStatus, Role
from .connection import DBConfig


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    escape = False
    lines = [ln for ln in sql.splitlines() if not ln.strip().startswith("--")]

    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'":
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == ";" and not in_single:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(config: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=config.host, port=config.port, user=config.user, password=config.password, use_pure=True)
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


def _run_script(config: DBConfig, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(config)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(config: DBConfig) -> None:
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> None:
    ensure_database_exists(config)
    _run_script(config, schema_path)


def apply_seed_sql(config: DBConfig, *, seed_path: str | Path) -> None:
    _run_script(config, seed_path)


def ensure_demo_owner(config: DBConfig, *, email: str = "owner@laundryops.local", password: str = "owner123") -> None:
    """Upsert an approved owner account so a fresh database can be signed into."""
    conn = _connect(config)
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = hash_password(password)
        cur.execute(
            "SELECT id FROM dashboard_users WHERE email=%s AND role=%s AND outlet_id IS NULL",
            (email, Role.OWNER.value),
        )
        existing = cur.fetchone()
        if existing:
            cur.execute(
                "UPDATE dashboard_users SET password_hash=%s, status=%s WHERE id=%s",
                (password_hash, RegistrationStatus.APPROVED.value, existing["id"]),
            )
        else:
            cur.execute(
                """
                INSERT INTO dashboard_users (id, email, password_hash, role, outlet_id, status)
                VALUES (%s, %s, %s, %s, NULL, %s)
                """,
                (str(uuid.uuid4()), email, password_hash, Role.OWNER.value, RegistrationStatus.APPROVED.value),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(config: DBConfig) -> list[str]:
    conn = _connect(config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
