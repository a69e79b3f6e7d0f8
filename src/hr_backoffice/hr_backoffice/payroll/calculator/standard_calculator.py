from __future__ import annotations

from decimal import Decimal

from ...core.constants import MONEY_QUANTUM
from ..model import SalaryComponents
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: base + allowances + bonus - deductions - tax."""

    def net_salary(self, components: SalaryComponents) -> Decimal:
        gross = components.base_salary + components.allowances + components.bonus
        return (gross - components.deductions - components.tax_amount).quantize(MONEY_QUANTUM)
