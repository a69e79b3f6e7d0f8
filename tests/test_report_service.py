from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus, Role
from src.hr_backoffice.hr_backoffice.core.exceptions import AuthorizationError, BadRequestError
from src.hr_backoffice.hr_backoffice.reports.service import AttendanceReportService


@pytest.fixture()
def report(attendance_repo, employees):
    return AttendanceReportService(attendance_repo, employees)


def _add(repo, employee_id, day, status, hours="0"):
    attendance_id = repo.create(employee_id=employee_id, work_date=date(2024, 3, day), status=status)
    if hours != "0":
        repo.rows[attendance_id] = replace(repo.rows[attendance_id], work_hours=Decimal(hours))


def test_summary_groups_counts_and_averages(report, attendance_repo, make_employee):
    ada = make_employee()
    bob = make_employee(email="bob@example.com", first_name="Bob", last_name="Stone")
    _add(attendance_repo, ada.employee_id, 4, AttendanceStatus.PRESENT, "8.00")
    _add(attendance_repo, ada.employee_id, 5, AttendanceStatus.PRESENT, "7.25")
    _add(attendance_repo, ada.employee_id, 6, AttendanceStatus.LEAVE)
    _add(attendance_repo, bob.employee_id, 4, AttendanceStatus.WFH, "6.5")
    _add(attendance_repo, bob.employee_id, 5, AttendanceStatus.HALF_DAY, "4")
    # outside the range
    _add(attendance_repo, bob.employee_id, 20, AttendanceStatus.ABSENT)

    rows = report.get_summary(start=date(2024, 3, 1), end=date(2024, 3, 10), current_role=Role.HR)

    assert [r.employee_id for r in rows] == [ada.employee_id, bob.employee_id]
    a, b = rows
    assert a.employee_name == "Ada Lovelace"
    assert (a.present, a.leave, a.absent) == (2, 1, 0)
    assert a.total_work_hours == Decimal("15.25")
    # 15.25 / 3 = 5.0833...
    assert a.average_work_hours == Decimal("5.08")
    assert (b.wfh, b.half_day, b.absent) == (1, 1, 0)
    assert b.total_records == 2
    assert b.average_work_hours == Decimal("5.25")


def test_summary_bounds_are_inclusive(report, attendance_repo, make_employee):
    ada = make_employee()
    _add(attendance_repo, ada.employee_id, 1, AttendanceStatus.PRESENT)
    _add(attendance_repo, ada.employee_id, 31, AttendanceStatus.ABSENT)

    (row,) = report.get_summary(start=date(2024, 3, 1), end=date(2024, 3, 31), current_role=Role.ADMIN)

    assert row.total_records == 2


def test_summary_skips_deleted_employees(report, attendance_repo, employees, make_employee):
    ada = make_employee()
    gone = make_employee(email="gone@example.com")
    _add(attendance_repo, ada.employee_id, 4, AttendanceStatus.PRESENT)
    _add(attendance_repo, gone.employee_id, 4, AttendanceStatus.PRESENT)
    employees.delete_by_id(gone.employee_id)

    rows = report.get_summary(start=date(2024, 3, 1), end=date(2024, 3, 31), current_role=Role.SUPER_ADMIN)

    assert [r.employee_id for r in rows] == [ada.employee_id]


def test_summary_requires_both_bounds(report):
    with pytest.raises(BadRequestError, match="Start date and end date are required"):
        report.get_summary(start=date(2024, 3, 1), end=None, current_role=Role.HR)


@pytest.mark.parametrize("role", [Role.EMPLOYEE, Role.ACCOUNTS])
def test_summary_needs_privileged_role(report, role):
    with pytest.raises(AuthorizationError):
        report.get_summary(start=date(2024, 3, 1), end=date(2024, 3, 2), current_role=role)


def test_summary_empty_range(report):
    assert report.get_summary(start=date(2024, 3, 1), end=date(2024, 3, 2), current_role=Role.HR) == []
