from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus, EmploymentType
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..employees.model import EmployeeDisplay
from .model import DEFAULT_LOCATION, AttendanceRecord, GeoPoint
from .repository import AttendanceRepository

_COLUMNS = """
    ar.attendance_id, ar.employee_id, ar.work_date, ar.status,
    ar.check_in_time, ar.check_in_lng, ar.check_in_lat,
    ar.check_out_time, ar.check_out_lng, ar.check_out_lat,
    ar.work_hours, ar.notes, ar.created_at, ar.updated_at
"""


def _point(lng, lat) -> GeoPoint:
    if lng is None or lat is None:
        return DEFAULT_LOCATION
    return GeoPoint(longitude=float(lng), latitude=float(lat))


def _row_to_record(r: dict, *, with_employee: bool = False) -> AttendanceRecord:
    employee = None
    if with_employee and r.get("first_name") is not None:
        employee = EmployeeDisplay(
            employee_id=int(r["employee_id"]),
            first_name=r["first_name"],
            last_name=r["last_name"],
            employment_type=EmploymentType(r["employment_type"]),
        )

    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_in_location=_point(r.get("check_in_lng"), r.get("check_in_lat")),
        check_out_time=r.get("check_out_time"),
        check_out_location=_point(r.get("check_out_lng"), r.get("check_out_lat")),
        work_hours=Decimal(r.get("work_hours") or 0).quantize(Decimal("0.01")),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee=employee,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE ar.employee_id=%s AND ar.work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime] = None,
        check_in_location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> int:
        location = check_in_location or DEFAULT_LOCATION
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, status, check_in_time, check_in_lng, check_in_lat, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        work_date,
                        status.value,
                        check_in_time,
                        location.longitude,
                        location.latitude,
                        notes,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Attendance record already exists for this day") from e
            raise

    def record_check_in(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        location: GeoPoint,
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_lng=%s, check_in_lat=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (check_in_time, location.longitude, location.latitude, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: GeoPoint,
        work_hours: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_lng=%s, check_out_lat=%s, work_hours=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (check_out_time, location.longitude, location.latitude, work_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET status=%s, notes=%s WHERE attendance_id=%s",
                (status.value, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["ar.employee_id=%s"]
        params: list[object] = [int(employee_id)]

        if start is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.first_name, e.last_name, e.employment_type
                FROM attendance_records ar
                LEFT JOIN employees e ON e.employee_id = ar.employee_id
                WHERE {where}
                ORDER BY ar.work_date DESC
                """,
                tuple(params),
            )
            return [_row_to_record(r, with_employee=True) for r in fetchall(cur)]

    def list_in_range(self, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE ar.work_date BETWEEN %s AND %s
                ORDER BY ar.employee_id ASC, ar.work_date ASC
                """,
                (start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
