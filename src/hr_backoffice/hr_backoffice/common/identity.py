"""Caller identity and target-employee resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated caller as supplied by the login session."""

    user_id: int
    role: Role

    @property
    def is_employee(self) -> bool:
        return self.role == Role.EMPLOYEE


def resolve_target_employee(
    caller: CallerIdentity,
    explicit_id: Optional[int],
    *,
    employees: EmployeeRepository,
) -> int:
    """Pick the employee an attendance action applies to.

    Outcomes:
    - ``explicit_id`` given: returned as-is (existence is checked by the caller).
    - otherwise the employee linked to the caller's account.
    - no linked employee: NotFoundError.
    """

    if explicit_id is not None:
        return int(explicit_id)

    employee = employees.get_by_user_id(caller.user_id)
    if not employee:
        raise NotFoundError("Employee record not found")
    return employee.employee_id
