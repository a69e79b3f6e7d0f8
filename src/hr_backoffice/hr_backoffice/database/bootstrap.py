"""Schema and demo-data setup used by ``create_app`` and ``scripts/init_db.py``."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)

# (email, username, password, role, employee email to link)
DEMO_ACCOUNTS = (
    ("admin@example.com", "admin", "admin123", "super_admin", None),
    ("hannah.reyes@example.com", "hreyes", "hr12345", "hr", "hannah.reyes@example.com"),
    ("payroll@example.com", "payroll", "accounts123", "accounts", None),
    ("omar.haddad@example.com", "ohaddad", "employee123", "employee", "omar.haddad@example.com"),
)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hr_backoffice")),
    )


@contextmanager
def _connection(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql names a database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split on ``;`` outside quoted strings."""
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with _connection(target) as conn:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    with _connection(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied schema %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Applied seed %s (%d statements)", seed_path, count)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert the demo login accounts and link them to seeded employees."""

    with _connection(_as_target(db_config)) as conn:
        cur = conn.cursor(dictionary=True)

        def upsert_account(email: str, username: str, password: str, role: str) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE users
                    SET username=%s, password_hash=%s, role=%s, is_active=1
                    WHERE user_id=%s
                    """,
                    (username, password_hash, role, existing["user_id"]),
                )
                return int(existing["user_id"])
            cur.execute(
                "INSERT INTO users (username, email, password_hash, role) VALUES (%s, %s, %s, %s)",
                (username, email, password_hash, role),
            )
            return int(cur.lastrowid)

        for email, username, password, role, employee_email in DEMO_ACCOUNTS:
            user_id = upsert_account(email, username, password, role)
            if employee_email is None:
                continue
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (employee_email,))
            row = cur.fetchone()
            if not row:
                logger.warning("Demo employee %s missing; account %s left unlinked", employee_email, email)
                continue
            cur.execute("UPDATE employees SET user_id=%s WHERE employee_id=%s", (user_id, row["employee_id"]))
            cur.execute("UPDATE users SET employee_id=%s WHERE user_id=%s", (row["employee_id"], user_id))

        conn.commit()
        logger.info("Demo accounts ready (%d)", len(DEMO_ACCOUNTS))


def list_tables(db_config: dict) -> list[str]:
    with _connection(_as_target(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
