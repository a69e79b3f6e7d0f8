from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentMethod, PaymentStatus
from ..employees.model import EmployeeDisplay


@dataclass(frozen=True)
class SalaryComponents:
    base_salary: Decimal
    allowances: Decimal = Decimal("0.00")
    deductions: Decimal = Decimal("0.00")
    bonus: Decimal = Decimal("0.00")
    tax_amount: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one payroll record per employee per (month, year)."""

    payroll_id: int
    employee_id: int
    month: int
    year: int
    base_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    bonus: Decimal
    tax_amount: Decimal
    net_salary: Decimal
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    payment_date: Optional[datetime] = None
    payment_reference: Optional[str] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: Optional[EmployeeDisplay] = field(default=None, compare=False)

    @property
    def is_deletable(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING
