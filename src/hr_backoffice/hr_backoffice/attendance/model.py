from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from ..employees.model import EmployeeDisplay


@dataclass(frozen=True)
class GeoPoint:
    """A GeoJSON point, stored as [longitude, latitude].

    (0, 0) is stored when the client sends no location and means "unknown".
    """

    longitude: float = 0.0
    latitude: float = 0.0

    @property
    def coordinates(self) -> list[float]:
        return [self.longitude, self.latitude]

    @property
    def is_unknown(self) -> bool:
        return self.longitude == 0.0 and self.latitude == 0.0


DEFAULT_LOCATION = GeoPoint()


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_in_location: GeoPoint = DEFAULT_LOCATION
    check_out_time: Optional[datetime] = None
    check_out_location: GeoPoint = DEFAULT_LOCATION
    work_hours: Decimal = Decimal("0.00")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: Optional[EmployeeDisplay] = field(default=None, compare=False)


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model: one aggregate row per employee over a date range."""

    employee_id: int
    employee_name: str
    present: int = 0
    absent: int = 0
    half_day: int = 0
    leave: int = 0
    wfh: int = 0
    total_work_hours: Decimal = Decimal("0.00")
    average_work_hours: Decimal = Decimal("0.00")

    @property
    def total_records(self) -> int:
        return self.present + self.absent + self.half_day + self.leave + self.wfh
