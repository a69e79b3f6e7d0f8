from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, GeoPoint


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert a record. Raises ConflictError if (employee_id, work_date) exists."""

        raise NotImplementedError

    def record_check_in(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        location: GeoPoint,
        status: AttendanceStatus,
    ) -> bool:
        """Set the check-in only while none is stored; False when another writer won."""

        raise NotImplementedError

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: GeoPoint,
        work_hours: Decimal,
    ) -> bool:
        """Set the check-out only while none is stored; False when another writer won."""

        raise NotImplementedError

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records ordered by date descending, joined with employee display fields."""

        raise NotImplementedError

    def list_in_range(self, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
