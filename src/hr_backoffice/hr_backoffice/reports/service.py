from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.model import AttendanceSummary
from ..attendance.repository import AttendanceRepository
from ..core.constants import HOURS_QUANTUM
from ..core.enums import REPORT_ROLES, AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, BadRequestError
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    counts: dict[AttendanceStatus, int] = field(default_factory=lambda: {s: 0 for s in AttendanceStatus})
    total_hours: Decimal = Decimal("0.00")
    records: int = 0


class AttendanceReportService:
    """Read-only aggregation over the attendance ledger.

    Employee names come from an explicit batch lookup against the directory
    after grouping, never from the ledger rows themselves.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def get_summary(
        self,
        *,
        start: Optional[date],
        end: Optional[date],
        current_role: Role,
    ) -> list[AttendanceSummary]:
        if start is None or end is None:
            raise BadRequestError("Start date and end date are required")
        if current_role not in REPORT_ROLES:
            raise AuthorizationError("Not authorized to view attendance summary")

        buckets: dict[int, _Bucket] = {}
        for record in self._attendance.list_in_range(start=start, end=end):
            b = buckets.setdefault(record.employee_id, _Bucket())
            b.counts[record.status] += 1
            b.total_hours += record.work_hours
            b.records += 1

        names = self._employees.get_display_many(buckets.keys())

        summary: list[AttendanceSummary] = []
        for employee_id in sorted(buckets):
            display = names.get(employee_id)
            if display is None:
                logger.debug("Skipping attendance of deleted employee %s", employee_id)
                continue

            b = buckets[employee_id]
            average = (b.total_hours / b.records).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)
            summary.append(
                AttendanceSummary(
                    employee_id=employee_id,
                    employee_name=display.full_name,
                    present=b.counts[AttendanceStatus.PRESENT],
                    absent=b.counts[AttendanceStatus.ABSENT],
                    half_day=b.counts[AttendanceStatus.HALF_DAY],
                    leave=b.counts[AttendanceStatus.LEAVE],
                    wfh=b.counts[AttendanceStatus.WFH],
                    total_work_hours=b.total_hours,
                    average_work_hours=average,
                )
            )
        return summary
