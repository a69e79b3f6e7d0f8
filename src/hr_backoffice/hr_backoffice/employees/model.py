from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import BloodGroup, EmploymentType


@dataclass(frozen=True)
class Address:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True)
class EmergencyContact:
    name: Optional[str] = None
    relation: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class EmployeeData:
    """Writable employee fields (everything except id and timestamps)."""

    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: date
    employment_type: EmploymentType
    department: str
    position: str
    joining_date: date
    salary: Decimal
    address: Optional[Address] = None
    blood_group: Optional[BloodGroup] = None
    emergency_contact: Optional[EmergencyContact] = None
    user_id: Optional[int] = None
    is_active: bool = True
    last_appraisal: Optional[date] = None
    next_appraisal: Optional[date] = None


@dataclass(frozen=True)
class Employee(EmployeeData):
    """Domain entity: an employee record owned by the directory."""

    employee_id: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class EmployeeDisplay:
    """Read-side join of employee fields shown next to ledger rows."""

    employee_id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    department: Optional[str] = None
    position: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
