from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import hours_between, now_local
from ..common.identity import CallerIdentity, resolve_target_employee
from ..common.validators import require_enum
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError
from ..employees.repository import EmployeeRepository
from .model import DEFAULT_LOCATION, AttendanceRecord, GeoPoint
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# A day with a check-in carries worked hours.
_NON_WORKING = frozenset({AttendanceStatus.ABSENT, AttendanceStatus.LEAVE})


class AttendanceService:
    """Use case: daily check-in / check-out against the attendance ledger.

    The ledger holds at most one record per (employee, day). The store's
    unique key rejects a concurrent duplicate insert, and check-in/check-out
    are conditional updates, so a losing writer gets ConflictError instead
    of overwriting the winner.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock

    def _now(self) -> datetime:
        # The store keeps whole seconds; work hours are derived from stored values.
        return self._clock().replace(microsecond=0)

    def _resolve(self, caller: CallerIdentity, employee_id: Optional[int]) -> int:
        target = resolve_target_employee(caller, employee_id, employees=self._employees)
        if not self._employees.get_by_id(target):
            raise NotFoundError("Employee not found")
        return target

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def check_in(
        self,
        caller: CallerIdentity,
        *,
        employee_id: Optional[int] = None,
        location: Optional[GeoPoint] = None,
    ) -> AttendanceRecord:
        target = self._resolve(caller, employee_id)
        now = self._now()
        today = now.date()
        location = location or DEFAULT_LOCATION

        existing = self._attendance.get_for_employee_and_date(target, today)
        if existing:
            if existing.check_in_time is not None:
                raise ConflictError("Already checked in today")

            updated = self._attendance.record_check_in(
                attendance_id=existing.attendance_id,
                check_in_time=now,
                location=location,
                status=AttendanceStatus.PRESENT,
            )
            if not updated:
                raise ConflictError("Already checked in today")
            attendance_id = existing.attendance_id
        else:
            try:
                attendance_id = self._attendance.create(
                    employee_id=target,
                    work_date=today,
                    status=AttendanceStatus.PRESENT,
                    check_in_time=now,
                    check_in_location=location,
                )
            except ConflictError as e:
                logger.info("Concurrent check-in rejected for employee %s on %s", target, today)
                raise ConflictError("Already checked in today") from e

        logger.info("Employee %s checked in at %s", target, now.isoformat())
        return self._reload(attendance_id)

    def check_out(
        self,
        caller: CallerIdentity,
        *,
        employee_id: Optional[int] = None,
        location: Optional[GeoPoint] = None,
    ) -> AttendanceRecord:
        target = self._resolve(caller, employee_id)
        now = self._now()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(target, today)
        if not record or record.check_in_time is None:
            raise InvalidStateError("No check-in record found for today")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out today")
        if now < record.check_in_time:
            raise InvalidStateError("Check-out time cannot be before check-in time")

        work_hours = hours_between(record.check_in_time, now)
        updated = self._attendance.record_check_out(
            attendance_id=record.attendance_id,
            check_out_time=now,
            location=location or DEFAULT_LOCATION,
            work_hours=work_hours,
        )
        if not updated:
            raise ConflictError("Already checked out today")

        logger.info("Employee %s checked out at %s (%s h)", target, now.isoformat(), work_hours)
        return self._reload(record.attendance_id)

    def record_status(
        self,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus | str,
        *,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Mark a day (absent, leave, wfh, ...) without touching check-in/out or work hours."""

        status = require_enum(status, AttendanceStatus, "status")
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        existing = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if existing:
            if existing.check_in_time is not None and status in _NON_WORKING:
                raise InvalidStateError(f"Cannot mark a checked-in day as {status.value}")
            self._attendance.update_status(attendance_id=existing.attendance_id, status=status, notes=notes)
            attendance_id = existing.attendance_id
        else:
            attendance_id = self._attendance.create(
                employee_id=int(employee_id),
                work_date=work_date,
                status=status,
                notes=notes,
            )

        logger.info("Employee %s marked %s on %s", employee_id, status.value, work_date.isoformat())
        return self._reload(attendance_id)

    def get_today(self, caller: CallerIdentity, *, employee_id: Optional[int] = None) -> Optional[AttendanceRecord]:
        target = self._resolve(caller, employee_id)
        return self._attendance.get_for_employee_and_date(target, self._now().date())

    def get_by_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_employee(int(employee_id), start=start, end=end)
