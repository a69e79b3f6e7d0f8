from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.hr_backoffice.hr_backoffice.attendance.model import GeoPoint
from src.hr_backoffice.hr_backoffice.common.identity import CallerIdentity
from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus, Role
from src.hr_backoffice.hr_backoffice.core.exceptions import (
    BadRequestError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
)


def _me(account) -> CallerIdentity:
    return CallerIdentity(user_id=account.user_id, role=account.role)


def test_check_in_creates_present_record_then_rejects_second(attendance_service, worker):
    employee, account = worker

    record = attendance_service.check_in(_me(account))

    assert record.employee_id == employee.employee_id
    assert record.work_date == date(2024, 3, 15)
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_out_time is None
    assert record.check_in_location.is_unknown

    with pytest.raises(ConflictError, match="Already checked in today"):
        attendance_service.check_in(_me(account))


def test_check_in_then_out_computes_work_hours(attendance_service, worker, clock):
    _, account = worker

    attendance_service.check_in(_me(account), location=GeoPoint(106.7, 10.8))
    clock.set(2024, 3, 15, 17, 30)
    record = attendance_service.check_out(_me(account), location=GeoPoint(106.7, 10.8))

    assert record.work_hours == Decimal("8.50")
    assert record.check_in_location.coordinates == [106.7, 10.8]


def test_work_hours_round_half_up(attendance_service, worker, clock):
    _, account = worker

    attendance_service.check_in(_me(account))
    # 1h 0m 18s = 1.005h
    clock.advance(hours=1, seconds=18)
    record = attendance_service.check_out(_me(account))

    assert record.work_hours == Decimal("1.01")


def test_check_out_without_check_in_is_invalid_state(attendance_service, worker, attendance_repo):
    _, account = worker

    with pytest.raises(InvalidStateError, match="No check-in record found for today"):
        attendance_service.check_out(_me(account))
    assert attendance_repo.rows == {}


def test_check_out_twice_conflicts_and_keeps_first(attendance_service, worker, clock):
    _, account = worker
    attendance_service.check_in(_me(account))
    clock.set(2024, 3, 15, 12, 0)
    first = attendance_service.check_out(_me(account))

    clock.set(2024, 3, 15, 18, 0)
    with pytest.raises(ConflictError, match="Already checked out today"):
        attendance_service.check_out(_me(account))

    again = attendance_service.get_today(_me(account))
    assert again.check_out_time == first.check_out_time
    assert again.work_hours == Decimal("3.00")


def test_check_in_fills_status_only_record(attendance_service, worker):
    employee, account = worker
    attendance_service.record_status(employee.employee_id, date(2024, 3, 15), "wfh", notes="remote")

    record = attendance_service.check_in(_me(account))

    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_time is not None
    assert record.notes == "remote"


def test_status_only_record_has_no_check_in_for_check_out(attendance_service, worker):
    employee, account = worker
    attendance_service.record_status(employee.employee_id, date(2024, 3, 15), AttendanceStatus.LEAVE)

    with pytest.raises(InvalidStateError):
        attendance_service.check_out(_me(account))


def test_explicit_employee_id_wins_over_caller(attendance_service, make_employee, accounts):
    hr = accounts.add(email="hr@example.com", password="secret123", role=Role.HR)
    other = make_employee(email="bob@example.com", first_name="Bob")

    record = attendance_service.check_in(_me(hr), employee_id=other.employee_id)

    assert record.employee_id == other.employee_id


def test_caller_without_employee_record_is_not_found(attendance_service, accounts):
    admin = accounts.add(email="root@example.com", password="secret123", role=Role.ADMIN)

    with pytest.raises(NotFoundError, match="Employee record not found"):
        attendance_service.check_in(_me(admin))


def test_unknown_explicit_employee_is_not_found(attendance_service, accounts):
    admin = accounts.add(email="root@example.com", password="secret123", role=Role.ADMIN)

    with pytest.raises(NotFoundError, match="Employee not found"):
        attendance_service.check_in(_me(admin), employee_id=999)


def test_lost_insert_race_is_reported_as_conflict(attendance_service, attendance_repo, worker):
    employee, account = worker
    real_lookup = attendance_repo.get_for_employee_and_date

    # Another request inserts between our read and our insert.
    def stale_lookup(employee_id, work_date):
        attendance_repo.get_for_employee_and_date = real_lookup
        attendance_repo.create(employee_id=employee_id, work_date=work_date, status=AttendanceStatus.PRESENT)
        return None

    attendance_repo.get_for_employee_and_date = stale_lookup

    with pytest.raises(ConflictError, match="Already checked in today"):
        attendance_service.check_in(_me(account))
    assert len(attendance_repo.rows) == 1


def test_new_day_gets_new_record(attendance_service, worker, clock):
    _, account = worker
    first = attendance_service.check_in(_me(account))
    clock.set(2024, 3, 16, 9, 0)
    second = attendance_service.check_in(_me(account))

    assert first.attendance_id != second.attendance_id
    assert second.work_date == date(2024, 3, 16)


def test_get_by_employee_orders_newest_first_with_display(attendance_service, worker, clock):
    employee, account = worker
    for day in (13, 14, 15):
        clock.set(2024, 3, day, 9, 0)
        attendance_service.check_in(_me(account))

    records = attendance_service.get_by_employee(employee.employee_id)
    assert [r.work_date.day for r in records] == [15, 14, 13]
    assert records[0].employee.first_name == "Ada"

    ranged = attendance_service.get_by_employee(
        employee.employee_id, start=date(2024, 3, 14), end=date(2024, 3, 14)
    )
    assert [r.work_date.day for r in ranged] == [14]


def test_record_status_rejects_unknown_status(attendance_service, worker):
    employee, _ = worker
    with pytest.raises(BadRequestError):
        attendance_service.record_status(employee.employee_id, date(2024, 3, 15), "holiday")


def test_record_status_for_missing_employee(attendance_service):
    with pytest.raises(NotFoundError):
        attendance_service.record_status(42, date(2024, 3, 15), "absent")


def test_checked_in_day_cannot_be_marked_absent(attendance_service, attendance_repo, worker, clock):
    employee, account = worker
    attendance_service.check_in(_me(account))
    clock.set(2024, 3, 15, 17, 30)
    attendance_service.check_out(_me(account))

    with pytest.raises(InvalidStateError, match="Cannot mark a checked-in day as absent"):
        attendance_service.record_status(employee.employee_id, date(2024, 3, 15), "absent")

    half = attendance_service.record_status(employee.employee_id, date(2024, 3, 15), "half-day")
    assert half.status == AttendanceStatus.HALF_DAY
    assert half.work_hours == Decimal("8.50")
    assert len(attendance_repo.rows) == 1
