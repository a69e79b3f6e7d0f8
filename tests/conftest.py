from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

import pytest
from werkzeug.security import generate_password_hash

from src.hr_backoffice.hr_backoffice.accounts.model import Account
from src.hr_backoffice.hr_backoffice.attendance.model import DEFAULT_LOCATION, AttendanceRecord
from src.hr_backoffice.hr_backoffice.attendance.service import AttendanceService
from src.hr_backoffice.hr_backoffice.core.enums import (
    AttendanceStatus,
    EmploymentType,
    PaymentStatus,
    Role,
)
from src.hr_backoffice.hr_backoffice.core.exceptions import ConflictError
from src.hr_backoffice.hr_backoffice.employees.model import Employee, EmployeeData, EmployeeDisplay
from src.hr_backoffice.hr_backoffice.payroll.model import PayrollRecord, SalaryComponents
from src.hr_backoffice.hr_backoffice.payroll.service import PayrollService


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, *args) -> None:
        self.now = datetime(*args)

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryAccounts:
    def __init__(self):
        self.by_id: dict[int, Account] = {}
        self._next_id = 1

    def add(self, *, email: str, password: str, role: Role, employee_id=None, is_active=True) -> Account:
        account = Account(
            user_id=self._next_id,
            username=email.split("@")[0],
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            employee_id=employee_id,
            is_active=is_active,
        )
        self.by_id[account.user_id] = account
        self._next_id += 1
        return account

    def link(self, user_id: int, employee_id: Optional[int]) -> None:
        self.by_id[user_id] = replace(self.by_id[user_id], employee_id=employee_id)

    def get_by_id(self, user_id: int) -> Optional[Account]:
        return self.by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[Account]:
        return next((a for a in self.by_id.values() if a.email == email), None)

    def create_account(self, *, username: str, email: str, password_hash: str, role: Role) -> int:
        if self.get_by_email(email):
            raise ConflictError("User already exists")
        account = Account(self._next_id, username, email, password_hash, role)
        self.by_id[account.user_id] = account
        self._next_id += 1
        return account.user_id


class InMemoryEmployees:
    """Employee directory with the same unique email key as the MySQL table."""

    def __init__(self, accounts: InMemoryAccounts):
        self.accounts = accounts
        self.by_id: dict[int, Employee] = {}
        self._next_id = 1

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(employee_id)

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.user_id == user_id), None)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.email == email), None)

    def get_display_many(self, employee_ids: Iterable[int]) -> dict[int, EmployeeDisplay]:
        out = {}
        for employee_id in employee_ids:
            e = self.by_id.get(employee_id)
            if e:
                out[employee_id] = display_of(e)
        return out

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda e: e.employee_id, reverse=True)

    def create(self, data: EmployeeData) -> int:
        if self.get_by_email(data.email):
            raise ConflictError("Employee with this email already exists")
        employee_id = self._next_id
        self._next_id += 1
        fields = {k: getattr(data, k) for k in data.__dataclass_fields__}
        self.by_id[employee_id] = Employee(**fields, employee_id=employee_id)
        if data.user_id is not None and data.user_id in self.accounts.by_id:
            self.accounts.link(data.user_id, employee_id)
        return employee_id

    def update(self, employee_id: int, data: EmployeeData) -> bool:
        current = self.by_id.get(employee_id)
        if not current:
            return False
        fields = {k: getattr(data, k) for k in data.__dataclass_fields__}
        self.by_id[employee_id] = replace(current, **fields)
        return True

    def delete_by_id(self, employee_id: int) -> bool:
        for account in list(self.accounts.by_id.values()):
            if account.employee_id == employee_id:
                self.accounts.link(account.user_id, None)
        return self.by_id.pop(employee_id, None) is not None

    def list_birthdays(self, *, month: int, day: int):
        return [
            e for e in self.by_id.values()
            if e.is_active and e.date_of_birth.month == month and e.date_of_birth.day == day
        ]

    def list_appraisals_due(self, *, start: date, end: date):
        return sorted(
            (e for e in self.by_id.values() if e.is_active and e.next_appraisal and start <= e.next_appraisal <= end),
            key=lambda e: e.next_appraisal,
        )

    def list_hr_emails(self) -> list[str]:
        emails = []
        for e in self.by_id.values():
            account = self.accounts.get_by_id(e.user_id) if e.user_id else None
            if account and account.role == Role.HR and account.is_active:
                emails.append(e.email)
        return emails


def display_of(e: Employee) -> EmployeeDisplay:
    return EmployeeDisplay(
        employee_id=e.employee_id,
        first_name=e.first_name,
        last_name=e.last_name,
        email=e.email,
        employment_type=e.employment_type,
        department=e.department,
        position=e.position,
    )


class InMemoryAttendance:
    """Attendance ledger enforcing UNIQUE (employee_id, work_date)."""

    def __init__(self, employees: InMemoryEmployees):
        self.employees = employees
        self.rows: dict[int, AttendanceRecord] = {}
        self._next_id = 1

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.rows.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.rows.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def create(self, *, employee_id, work_date, status, check_in_time=None, check_in_location=None, notes=None) -> int:
        if any(r.employee_id == employee_id and r.work_date == work_date for r in self.rows.values()):
            raise ConflictError("Attendance record already exists for this day")
        attendance_id = self._next_id
        self._next_id += 1
        self.rows[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            status=status,
            check_in_time=check_in_time,
            check_in_location=check_in_location or DEFAULT_LOCATION,
            notes=notes,
        )
        return attendance_id

    def record_check_in(self, *, attendance_id, check_in_time, location, status) -> bool:
        r = self.rows.get(attendance_id)
        if not r or r.check_in_time is not None:
            return False
        self.rows[attendance_id] = replace(r, check_in_time=check_in_time, check_in_location=location, status=status)
        return True

    def record_check_out(self, *, attendance_id, check_out_time, location, work_hours) -> bool:
        r = self.rows.get(attendance_id)
        if not r or r.check_in_time is None or r.check_out_time is not None:
            return False
        self.rows[attendance_id] = replace(
            r, check_out_time=check_out_time, check_out_location=location, work_hours=work_hours
        )
        return True

    def update_status(self, *, attendance_id, status, notes) -> bool:
        r = self.rows.get(attendance_id)
        if not r:
            return False
        self.rows[attendance_id] = replace(r, status=status, notes=notes)
        return True

    def list_for_employee(self, employee_id, *, start=None, end=None):
        out = []
        for r in self.rows.values():
            if r.employee_id != employee_id:
                continue
            if start and r.work_date < start:
                continue
            if end and r.work_date > end:
                continue
            e = self.employees.get_by_id(employee_id)
            display = (
                EmployeeDisplay(e.employee_id, e.first_name, e.last_name, employment_type=e.employment_type)
                if e
                else None
            )
            out.append(replace(r, employee=display))
        return sorted(out, key=lambda r: r.work_date, reverse=True)

    def list_in_range(self, *, start, end):
        return sorted(
            (r for r in self.rows.values() if start <= r.work_date <= end),
            key=lambda r: (r.employee_id, r.work_date),
        )


class InMemoryPayroll:
    """Payroll ledger enforcing UNIQUE (employee_id, month, year)."""

    def __init__(self, employees: InMemoryEmployees):
        self.employees = employees
        self.rows: dict[int, PayrollRecord] = {}
        self._next_id = 1
        self._created = datetime(2024, 1, 1)

    def _join(self, p: PayrollRecord, *, full: bool) -> PayrollRecord:
        e = self.employees.get_by_id(p.employee_id)
        if not e:
            return p
        display = display_of(e)
        if not full:
            display = EmployeeDisplay(e.employee_id, e.first_name, e.last_name, email=e.email)
        return replace(p, employee=display)

    def get_by_id(self, payroll_id, *, with_employee=False):
        p = self.rows.get(payroll_id)
        if p and with_employee:
            return self._join(p, full=True)
        return p

    def get_for_period(self, *, employee_id, month, year):
        return next(
            (p for p in self.rows.values() if (p.employee_id, p.month, p.year) == (employee_id, month, year)),
            None,
        )

    def create(self, *, employee_id, month, year, components: SalaryComponents, net_salary, payment_method, comments=None):
        if any((p.employee_id, p.month, p.year) == (employee_id, month, year) for p in self.rows.values()):
            raise ConflictError("Payroll for this month already exists")
        payroll_id = self._next_id
        self._next_id += 1
        self._created += timedelta(seconds=1)
        self.rows[payroll_id] = PayrollRecord(
            payroll_id=payroll_id,
            employee_id=employee_id,
            month=month,
            year=year,
            base_salary=components.base_salary,
            allowances=components.allowances,
            deductions=components.deductions,
            bonus=components.bonus,
            tax_amount=components.tax_amount,
            net_salary=net_salary,
            payment_method=payment_method,
            comments=comments,
            created_at=self._created,
        )
        return payroll_id

    def list(self, *, month=None, year=None, payment_status=None):
        out = [
            self._join(p, full=False)
            for p in self.rows.values()
            if (month is None or p.month == month)
            and (year is None or p.year == year)
            and (payment_status is None or p.payment_status == payment_status)
        ]
        return sorted(out, key=lambda p: p.created_at, reverse=True)

    def list_for_employee(self, employee_id):
        out = [p for p in self.rows.values() if p.employee_id == employee_id]
        return sorted(out, key=lambda p: (p.year, p.month), reverse=True)

    def update_status(self, *, payroll_id, payment_status, payment_date, payment_reference) -> bool:
        p = self.rows.get(payroll_id)
        if not p:
            return False
        self.rows[payroll_id] = replace(
            p, payment_status=payment_status, payment_date=payment_date, payment_reference=payment_reference
        )
        return True

    def delete_pending(self, payroll_id) -> bool:
        p = self.rows.get(payroll_id)
        if not p or p.payment_status != PaymentStatus.PENDING:
            return False
        del self.rows[payroll_id]
        return True


def employee_data(**overrides) -> EmployeeData:
    values = dict(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone="555-0100",
        date_of_birth=date(1990, 12, 10),
        employment_type=EmploymentType.FULL_TIME,
        department="Engineering",
        position="Engineer",
        joining_date=date(2020, 1, 6),
        salary=Decimal("60000.00"),
    )
    values.update(overrides)
    return EmployeeData(**values)


@pytest.fixture()
def clock():
    return FakeClock(datetime(2024, 3, 15, 9, 0, 0))


@pytest.fixture()
def accounts():
    return InMemoryAccounts()


@pytest.fixture()
def employees(accounts):
    return InMemoryEmployees(accounts)


@pytest.fixture()
def attendance_repo(employees):
    return InMemoryAttendance(employees)


@pytest.fixture()
def payroll_repo(employees):
    return InMemoryPayroll(employees)


@pytest.fixture()
def attendance_service(attendance_repo, employees, clock):
    return AttendanceService(attendance_repo, employees, clock=clock)


@pytest.fixture()
def payroll_service(payroll_repo, employees, clock):
    return PayrollService(payroll_repo, employees, clock=clock)


@pytest.fixture()
def worker(accounts, employees):
    """An employee-role account linked to an employee record."""
    account = accounts.add(email="ada@example.com", password="secret123", role=Role.EMPLOYEE)
    employee_id = employees.create(employee_data(user_id=account.user_id))
    return employees.get_by_id(employee_id), accounts.get_by_id(account.user_id)


@pytest.fixture()
def make_employee(employees):
    def _make(**overrides) -> Employee:
        return employees.get_by_id(employees.create(employee_data(**overrides)))

    return _make
