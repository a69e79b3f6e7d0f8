from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentMethod, PaymentStatus
from .model import PayrollRecord, SalaryComponents


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int, *, with_employee: bool = False) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_period(self, *, employee_id: int, month: int, year: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        month: int,
        year: int,
        components: SalaryComponents,
        net_salary,
        payment_method: PaymentMethod,
        comments: Optional[str] = None,
    ) -> int:
        """Insert a pending record. Raises ConflictError if the period already exists."""

        raise NotImplementedError

    def list(
        self,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Sequence[PayrollRecord]:
        """Newest-created first, joined with employee name and email."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        """Ordered by year then month, both descending."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        payroll_id: int,
        payment_status: PaymentStatus,
        payment_date: Optional[datetime],
        payment_reference: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_pending(self, payroll_id: int) -> bool:
        """Delete only while pending; False when the row is gone or no longer pending."""

        raise NotImplementedError
