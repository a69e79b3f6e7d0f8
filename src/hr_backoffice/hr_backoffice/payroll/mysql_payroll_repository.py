from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import PaymentMethod, PaymentStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..employees.model import EmployeeDisplay
from .model import PayrollRecord, SalaryComponents
from .repository import PayrollRepository

_COLUMNS = """
    p.payroll_id, p.employee_id, p.month, p.year, p.base_salary, p.allowances, p.deductions,
    p.bonus, p.tax_amount, p.net_salary, p.payment_status, p.payment_method, p.payment_date,
    p.payment_reference, p.comments, p.created_at, p.updated_at
"""

_EMPLOYEE_COLUMNS = "e.first_name, e.last_name, e.email, e.department, e.position"


def _money(value) -> Decimal:
    return Decimal(value if value is not None else 0).quantize(Decimal("0.01"))


def _row_to_record(r: dict, *, with_employee: bool = False) -> PayrollRecord:
    employee = None
    if with_employee and r.get("first_name") is not None:
        employee = EmployeeDisplay(
            employee_id=int(r["employee_id"]),
            first_name=r["first_name"],
            last_name=r["last_name"],
            email=r.get("email"),
            department=r.get("department"),
            position=r.get("position"),
        )

    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        base_salary=_money(r["base_salary"]),
        allowances=_money(r.get("allowances")),
        deductions=_money(r.get("deductions")),
        bonus=_money(r.get("bonus")),
        tax_amount=_money(r.get("tax_amount")),
        net_salary=_money(r["net_salary"]),
        payment_status=PaymentStatus(r["payment_status"]),
        payment_method=PaymentMethod(r["payment_method"]),
        payment_date=r.get("payment_date"),
        payment_reference=r.get("payment_reference"),
        comments=r.get("comments"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee=employee,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int, *, with_employee: bool = False) -> Optional[PayrollRecord]:
        columns = f"{_COLUMNS}, {_EMPLOYEE_COLUMNS}" if with_employee else _COLUMNS
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {columns}
                FROM payroll_records p
                LEFT JOIN employees e ON e.employee_id = p.employee_id
                WHERE p.payroll_id=%s
                """,
                (int(payroll_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r, with_employee=with_employee) if r else None

    def get_for_period(self, *, employee_id: int, month: int, year: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records p
                WHERE p.employee_id=%s AND p.month=%s AND p.year=%s
                """,
                (int(employee_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        month: int,
        year: int,
        components: SalaryComponents,
        net_salary,
        payment_method: PaymentMethod,
        comments: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll_records(
                        employee_id, month, year, base_salary, allowances, deductions, bonus,
                        tax_amount, net_salary, payment_status, payment_method, comments
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        int(month),
                        int(year),
                        components.base_salary,
                        components.allowances,
                        components.deductions,
                        components.bonus,
                        components.tax_amount,
                        net_salary,
                        PaymentStatus.PENDING.value,
                        payment_method.value,
                        comments,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Payroll for this month already exists") from e
            raise

    def list(
        self,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Sequence[PayrollRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if month is not None:
            clauses.append("p.month=%s")
            params.append(int(month))
        if year is not None:
            clauses.append("p.year=%s")
            params.append(int(year))
        if payment_status is not None:
            clauses.append("p.payment_status=%s")
            params.append(payment_status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.first_name, e.last_name, e.email
                FROM payroll_records p
                LEFT JOIN employees e ON e.employee_id = p.employee_id
                {where}
                ORDER BY p.created_at DESC, p.payroll_id DESC
                """,
                tuple(params),
            )
            return [_row_to_record(r, with_employee=True) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records p
                WHERE p.employee_id=%s
                ORDER BY p.year DESC, p.month DESC
                """,
                (int(employee_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def update_status(
        self,
        *,
        payroll_id: int,
        payment_status: PaymentStatus,
        payment_date: Optional[datetime],
        payment_reference: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET payment_status=%s, payment_date=%s, payment_reference=%s
                WHERE payroll_id=%s
                """,
                (payment_status.value, payment_date, payment_reference, int(payroll_id)),
            )
            return cur.rowcount > 0

    def delete_pending(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payroll_records WHERE payroll_id=%s AND payment_status=%s",
                (int(payroll_id), PaymentStatus.PENDING.value),
            )
            return cur.rowcount > 0
