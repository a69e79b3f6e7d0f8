from __future__ import annotations

from typing import Optional

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Account
from .repository import AccountRepository


def _row_to_account(row: dict) -> Account:
    return Account(
        user_id=int(row["user_id"]),
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        employee_id=int(row["employee_id"]) if row.get("employee_id") is not None else None,
        is_active=bool(row.get("is_active", True)),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, username, email, password_hash, role, employee_id, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return _row_to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, username, email, password_hash, role, employee_id, is_active
                FROM users
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _row_to_account(row) if row else None

    def create_account(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: Role,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(username, email, password_hash, role, is_active)
                    VALUES(%s,%s,%s,%s,1)
                    """,
                    (username, email, password_hash, role.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("User already exists") from e
            raise
