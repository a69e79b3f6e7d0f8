from __future__ import annotations

from datetime import datetime
from numbers import Real
from typing import Any, Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.exceptions import ValidationError
from ..employees.serializers import display_to_json
from .model import AttendanceRecord, AttendanceSummary, GeoPoint


def parse_location(value: Any) -> Optional[GeoPoint]:
    """Accept ``[longitude, latitude]``; None means "not supplied"."""

    if value is None:
        return None
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or not all(isinstance(v, Real) and not isinstance(v, bool) for v in value)
    ):
        raise ValidationError("Location must be [longitude, latitude]")
    return GeoPoint(longitude=float(value[0]), latitude=float(value[1]))


def _punch(time: Optional[datetime], location: GeoPoint) -> dict[str, Any]:
    return {
        "time": isoformat_or_none(time),
        "location": {"type": "Point", "coordinates": location.coordinates},
    }


def record_to_json(r: AttendanceRecord) -> dict[str, Any]:
    out = {
        "id": r.attendance_id,
        "employeeId": r.employee_id,
        "date": r.work_date.isoformat(),
        "checkIn": _punch(r.check_in_time, r.check_in_location),
        "checkOut": _punch(r.check_out_time, r.check_out_location),
        "status": r.status.value,
        "workHours": float(r.work_hours),
        "notes": r.notes,
        "createdAt": isoformat_or_none(r.created_at),
        "updatedAt": isoformat_or_none(r.updated_at),
    }
    if r.employee is not None:
        out["employee"] = display_to_json(r.employee)
    return out


def summary_to_json(s: AttendanceSummary) -> dict[str, Any]:
    return {
        "employeeId": s.employee_id,
        "employeeName": s.employee_name,
        "present": s.present,
        "absent": s.absent,
        "halfDay": s.half_day,
        "leave": s.leave,
        "wfh": s.wfh,
        "totalWorkHours": float(s.total_work_hours),
        "averageWorkHours": float(s.average_work_hours),
    }
