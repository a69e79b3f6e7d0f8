from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .accounts.mysql_account_repository import MySQLAccountRepository
from .accounts.repository import AccountRepository
from .accounts.service import AuthService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .notifications.notifier import LoggingNotifier
from .notifications.service import AlertService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    accounts_repo: AccountRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    payroll_repo: PayrollRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    report_service: AttendanceReportService
    alert_service: AlertService


def wire(
    *,
    accounts_repo: AccountRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    payroll_repo: PayrollRepository,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Build the services on top of any repository implementations."""
    return Container(
        accounts_repo=accounts_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        auth_service=AuthService(accounts_repo),
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo, clock=clock),
        payroll_service=PayrollService(payroll_repo, employees_repo, clock=clock),
        report_service=AttendanceReportService(attendance_repo, employees_repo),
        alert_service=AlertService(employees_repo, LoggingNotifier(), clock=clock),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        accounts_repo=MySQLAccountRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
    )
