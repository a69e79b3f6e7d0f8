from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_number, require_enum, require_int_range, require_number
from ..core.constants import MAX_AMOUNT, MIN_PAYROLL_YEAR
from ..core.enums import PaymentMethod, PaymentStatus
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord, SalaryComponents
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Use case: the payroll ledger, one record per employee per (month, year).

    Net salary is computed once at creation and never recomputed.
    """

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def create(
        self,
        *,
        employee_id: int,
        month,
        year,
        base_salary,
        allowances=None,
        deductions=None,
        bonus=None,
        tax_amount=None,
        payment_method: Optional[PaymentMethod | str] = None,
        comments: Optional[str] = None,
    ) -> PayrollRecord:
        month = require_int_range(month, "month", minimum=1, maximum=12)
        year = require_int_range(year, "year", minimum=MIN_PAYROLL_YEAR)
        components = SalaryComponents(
            base_salary=require_number(base_salary, "Base salary"),
            allowances=optional_number(allowances, "Allowances"),
            deductions=optional_number(deductions, "Deductions"),
            bonus=optional_number(bonus, "Bonus"),
            tax_amount=optional_number(tax_amount, "Tax amount"),
        )
        method = (
            require_enum(payment_method, PaymentMethod, "payment method")
            if payment_method
            else PaymentMethod.BANK_TRANSFER
        )

        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        if self._payroll.get_for_period(employee_id=int(employee_id), month=month, year=year):
            raise ConflictError("Payroll for this month already exists")

        net_salary = self._calculator.net_salary(components)
        if abs(net_salary) >= MAX_AMOUNT:
            raise ValidationError("Net salary is out of range")
        payroll_id = self._payroll.create(
            employee_id=int(employee_id),
            month=month,
            year=year,
            components=components,
            net_salary=net_salary,
            payment_method=method,
            comments=comments,
        )
        logger.info("Created payroll %s for employee %s (%02d/%d) net=%s", payroll_id, employee_id, month, year, net_salary)
        return self.get(payroll_id)

    def get(self, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_by_id(int(payroll_id), with_employee=True)
        if not record:
            raise NotFoundError("Payroll not found")
        return record

    def list(
        self,
        *,
        month=None,
        year=None,
        payment_status: Optional[PaymentStatus | str] = None,
    ) -> Sequence[PayrollRecord]:
        return self._payroll.list(
            month=require_int_range(month, "month", minimum=1, maximum=12) if month not in (None, "") else None,
            year=require_int_range(year, "year", minimum=0) if year not in (None, "") else None,
            payment_status=require_enum(payment_status, PaymentStatus, "payment status") if payment_status else None,
        )

    def get_by_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")
        return self._payroll.list_for_employee(int(employee_id))

    def update_status(
        self,
        payroll_id: int,
        payment_status: PaymentStatus | str,
        *,
        payment_date: Optional[datetime] = None,
        payment_reference: Optional[str] = None,
    ) -> PayrollRecord:
        """Set the payment status.

        Any status may follow any other. Only "paid" stamps the payment date
        (default now) and reference; other statuses keep whatever is stored.
        """

        status = require_enum(payment_status, PaymentStatus, "payment status")
        record = self._payroll.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll not found")

        new_date = record.payment_date
        new_reference = record.payment_reference
        if status == PaymentStatus.PAID:
            new_date = payment_date or self._clock()
            new_reference = payment_reference

        self._payroll.update_status(
            payroll_id=record.payroll_id,
            payment_status=status,
            payment_date=new_date,
            payment_reference=new_reference,
        )
        logger.info("Payroll %s status %s -> %s", record.payroll_id, record.payment_status.value, status.value)
        return self.get(record.payroll_id)

    def delete(self, payroll_id: int) -> None:
        record = self._payroll.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll not found")
        if not record.is_deletable:
            raise InvalidStateError("Cannot delete processed payroll")

        if not self._payroll.delete_pending(record.payroll_id):
            # status changed between the read and the delete
            raise InvalidStateError("Cannot delete processed payroll")
        logger.info("Deleted payroll %s", record.payroll_id)
