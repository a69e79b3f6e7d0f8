from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import Employee, EmployeeData, EmployeeDisplay


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_display_many(self, employee_ids: Iterable[int]) -> dict[int, EmployeeDisplay]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        """All employees, newest first."""

        raise NotImplementedError

    def create(self, data: EmployeeData) -> int:
        """Insert an employee and link ``data.user_id``'s account to it.

        Returns employee_id. Raises ConflictError on a duplicate email.
        """

        raise NotImplementedError

    def update(self, employee_id: int, data: EmployeeData) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        """Delete an employee and clear the linked account's back-reference."""

        raise NotImplementedError

    def list_birthdays(self, *, month: int, day: int) -> Sequence[Employee]:
        raise NotImplementedError

    def list_appraisals_due(self, *, start: date, end: date) -> Sequence[Employee]:
        raise NotImplementedError

    def list_hr_emails(self) -> list[str]:
        """Emails of employees linked to an active HR account."""

        raise NotImplementedError
