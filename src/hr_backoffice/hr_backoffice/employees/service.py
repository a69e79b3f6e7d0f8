from __future__ import annotations

import logging
from dataclasses import fields as dataclass_fields
from dataclasses import replace
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.identity import CallerIdentity
from ..common.validators import (
    optional_date,
    require_date,
    require_email,
    require_enum,
    require_non_empty,
    require_number,
)
from ..core.enums import BloodGroup, EmploymentType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import Address, EmergencyContact, Employee, EmployeeData
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "date_of_birth",
    "employment_type",
    "department",
    "position",
    "joining_date",
    "salary",
)

# user_id is only set at creation, where the account back-reference is written.
UPDATABLE_FIELDS = frozenset(f.name for f in dataclass_fields(EmployeeData)) - {"user_id"}

_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "phone": "Phone number",
    "department": "Department",
    "position": "Position",
}


class EmployeeService:
    """Use case: manage the employee directory (HR)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def _clean(self, values: dict[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in values.items():
            if key in _LABELS:
                out[key] = require_non_empty(value, _LABELS[key])
            elif key == "email":
                out[key] = require_email(value)
            elif key in ("date_of_birth", "joining_date"):
                out[key] = require_date(value, key.replace("_", " "))
            elif key in ("last_appraisal", "next_appraisal"):
                out[key] = optional_date(value, key.replace("_", " "))
            elif key == "employment_type":
                out[key] = require_enum(value, EmploymentType, "employment type")
            elif key == "blood_group":
                out[key] = require_enum(value, BloodGroup, "blood group") if value else None
            elif key == "salary":
                out[key] = require_number(value, "Salary", minimum=Decimal("0"))
            elif key == "address":
                out[key] = self._as_part(value, Address, "address")
            elif key == "emergency_contact":
                out[key] = self._as_part(value, EmergencyContact, "emergency contact")
            elif key == "user_id":
                out[key] = self._as_user_id(value)
            elif key == "is_active":
                out[key] = bool(value)
            else:
                raise ValidationError(f"Unknown employee field: {key}")
        return out

    @staticmethod
    def _as_user_id(value) -> Optional[int]:
        if value in (None, ""):
            return None
        if isinstance(value, bool):
            raise ValidationError("Valid user id is required")
        try:
            return int(str(value).strip())
        except ValueError:
            raise ValidationError("Valid user id is required")

    @staticmethod
    def _as_part(value, cls, field_name: str):
        if value is None or isinstance(value, cls):
            return value
        if not isinstance(value, dict):
            raise ValidationError(f"Valid {field_name} is required")
        known = {f.name for f in dataclass_fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise ValidationError(f"Unknown {field_name} field: {sorted(unknown)[0]}")
        return cls(**value)

    def list_all(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get(self, employee_id: int, *, caller: Optional[CallerIdentity] = None) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        if caller is not None and caller.is_employee and employee.user_id != caller.user_id:
            raise AuthorizationError("Not authorized to access this employee data")
        return employee

    def create(self, **values: Any) -> Employee:
        missing = [name for name in REQUIRED_FIELDS if values.get(name) in (None, "")]
        if missing:
            label = _LABELS.get(missing[0], missing[0].replace("_", " ").capitalize())
            raise ValidationError(f"{label} is required")

        cleaned = self._clean(values)
        if self._employees.get_by_email(cleaned["email"]):
            raise ConflictError("Employee with this email already exists")

        data = EmployeeData(**cleaned)
        employee_id = self._employees.create(data)
        logger.info("Created employee %s (%s)", employee_id, data.email)
        return self.get(employee_id)

    def update(self, employee_id: int, **values: Any) -> Employee:
        current = self.get(employee_id)

        not_allowed = set(values) - UPDATABLE_FIELDS
        if not_allowed:
            raise ValidationError(f"Field cannot be updated: {sorted(not_allowed)[0]}")

        cleaned = self._clean(values)
        new_email = cleaned.get("email")
        if new_email and new_email != current.email:
            other = self._employees.get_by_email(new_email)
            if other and other.employee_id != current.employee_id:
                raise ConflictError("Employee with this email already exists")

        merged = replace(current, **cleaned)
        data = EmployeeData(
            **{f.name: getattr(merged, f.name) for f in dataclass_fields(EmployeeData)}
        )
        self._employees.update(current.employee_id, data)
        logger.info("Updated employee %s fields=%s", current.employee_id, sorted(cleaned))
        return self.get(current.employee_id)

    def delete(self, employee_id: int) -> None:
        employee = self.get(employee_id)
        if not self._employees.delete_by_id(employee.employee_id):
            raise NotFoundError("Employee not found")
        logger.info("Deleted employee %s", employee.employee_id)
