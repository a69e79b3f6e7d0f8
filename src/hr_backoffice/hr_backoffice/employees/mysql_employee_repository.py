from __future__ import annotations

from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import mysql.connector

from ..core.enums import BloodGroup, EmploymentType, Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, is_duplicate_key, load_json
from .model import Address, EmergencyContact, Employee, EmployeeData, EmployeeDisplay
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, first_name, last_name, email, phone, address, date_of_birth, blood_group,
    employment_type, department, position, joining_date, salary, emergency_contact,
    user_id, is_active, last_appraisal, next_appraisal, created_at, updated_at
"""


def _row_to_employee(r: dict) -> Employee:
    address = load_json(r.get("address"))
    contact = load_json(r.get("emergency_contact"))
    return Employee(
        employee_id=int(r["employee_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        phone=r["phone"],
        address=Address(**address) if address else None,
        date_of_birth=r["date_of_birth"],
        blood_group=BloodGroup(r["blood_group"]) if r.get("blood_group") else None,
        employment_type=EmploymentType(r["employment_type"]),
        department=r["department"],
        position=r["position"],
        joining_date=r["joining_date"],
        salary=Decimal(r["salary"]),
        emergency_contact=EmergencyContact(**contact) if contact else None,
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        is_active=bool(r.get("is_active", True)),
        last_appraisal=r.get("last_appraisal"),
        next_appraisal=r.get("next_appraisal"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _params(data: EmployeeData) -> tuple:
    return (
        data.first_name,
        data.last_name,
        data.email,
        data.phone,
        dump_json(asdict(data.address)) if data.address else None,
        data.date_of_birth,
        data.blood_group.value if data.blood_group else None,
        data.employment_type.value,
        data.department,
        data.position,
        data.joining_date,
        data.salary,
        dump_json(asdict(data.emergency_contact)) if data.emergency_contact else None,
        data.user_id,
        1 if data.is_active else 0,
        data.last_appraisal,
        data.next_appraisal,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {where}=%s", (value,))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("employee_id", int(employee_id))

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("email", email)

    def get_display_many(self, employee_ids: Iterable[int]) -> dict[int, EmployeeDisplay]:
        ids = sorted({int(i) for i in employee_ids})
        if not ids:
            return {}

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, first_name, last_name, email, employment_type, department, position
                FROM employees
                WHERE employee_id IN ({placeholders})
                """,
                tuple(ids),
            )
            return {
                int(r["employee_id"]): EmployeeDisplay(
                    employee_id=int(r["employee_id"]),
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                    email=r.get("email"),
                    employment_type=EmploymentType(r["employment_type"]),
                    department=r.get("department"),
                    position=r.get("position"),
                )
                for r in fetchall(cur)
            }

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY created_at DESC, employee_id DESC")
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create(self, data: EmployeeData) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(
                        first_name, last_name, email, phone, address, date_of_birth, blood_group,
                        employment_type, department, position, joining_date, salary, emergency_contact,
                        user_id, is_active, last_appraisal, next_appraisal
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    _params(data),
                )
                employee_id = int(cur.lastrowid)
                if data.user_id is not None:
                    cur.execute("UPDATE users SET employee_id=%s WHERE user_id=%s", (employee_id, data.user_id))
                return employee_id
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Employee with this email already exists") from e
            raise

    def update(self, employee_id: int, data: EmployeeData) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, email=%s, phone=%s, address=%s, date_of_birth=%s,
                        blood_group=%s, employment_type=%s, department=%s, position=%s, joining_date=%s,
                        salary=%s, emergency_contact=%s, user_id=%s, is_active=%s, last_appraisal=%s,
                        next_appraisal=%s
                    WHERE employee_id=%s
                    """,
                    _params(data) + (int(employee_id),),
                )
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Employee with this email already exists") from e
            raise

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET employee_id=NULL WHERE employee_id=%s", (int(employee_id),))
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def list_birthdays(self, *, month: int, day: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM employees
                WHERE is_active=1 AND MONTH(date_of_birth)=%s AND DAYOFMONTH(date_of_birth)=%s
                ORDER BY employee_id
                """,
                (int(month), int(day)),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_appraisals_due(self, *, start: date, end: date) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM employees
                WHERE is_active=1 AND next_appraisal BETWEEN %s AND %s
                ORDER BY next_appraisal ASC, employee_id ASC
                """,
                (start, end),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_hr_emails(self) -> list[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.email
                FROM employees e
                JOIN users u ON u.user_id = e.user_id
                WHERE u.role=%s AND u.is_active=1
                ORDER BY e.employee_id
                """,
                (Role.HR.value,),
            )
            return [r["email"] for r in fetchall(cur)]
