from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import SalaryComponents


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def net_salary(self, components: SalaryComponents) -> Decimal:
        raise NotImplementedError
