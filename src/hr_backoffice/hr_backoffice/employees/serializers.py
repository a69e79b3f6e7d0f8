from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from ..common.datetime_utils import isoformat_or_none
from .model import Address, EmergencyContact, Employee, EmployeeDisplay

# camelCase API keys -> service field names
_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "dateOfBirth": "date_of_birth",
    "bloodGroup": "blood_group",
    "employmentType": "employment_type",
    "department": "department",
    "position": "position",
    "joiningDate": "joining_date",
    "salary": "salary",
    "emergencyContact": "emergency_contact",
    "userId": "user_id",
    "isActive": "is_active",
    "lastAppraisal": "last_appraisal",
    "nextAppraisal": "next_appraisal",
}


def employee_fields_from_json(data: dict[str, Any]) -> dict[str, Any]:
    """Translate a JSON payload into EmployeeService keyword arguments.

    Keys the directory does not know are ignored.
    """

    out: dict[str, Any] = {}
    for key, name in _FIELD_MAP.items():
        if key not in data:
            continue
        value = data[key]
        if name == "address" and isinstance(value, dict):
            value = {("zip_code" if k == "zipCode" else k): v for k, v in value.items()}
        out[name] = value
    return out


def _address_to_json(address: Optional[Address]) -> Optional[dict]:
    if address is None:
        return None
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zipCode": address.zip_code,
        "country": address.country,
    }


def _contact_to_json(contact: Optional[EmergencyContact]) -> Optional[dict]:
    return asdict(contact) if contact is not None else None


def employee_to_json(e: Employee) -> dict[str, Any]:
    return {
        "id": e.employee_id,
        "firstName": e.first_name,
        "lastName": e.last_name,
        "email": e.email,
        "phone": e.phone,
        "address": _address_to_json(e.address),
        "dateOfBirth": isoformat_or_none(e.date_of_birth),
        "bloodGroup": e.blood_group.value if e.blood_group else None,
        "employmentType": e.employment_type.value,
        "department": e.department,
        "position": e.position,
        "joiningDate": isoformat_or_none(e.joining_date),
        "salary": float(e.salary),
        "emergencyContact": _contact_to_json(e.emergency_contact),
        "userId": e.user_id,
        "isActive": e.is_active,
        "lastAppraisal": isoformat_or_none(e.last_appraisal),
        "nextAppraisal": isoformat_or_none(e.next_appraisal),
        "createdAt": isoformat_or_none(e.created_at),
        "updatedAt": isoformat_or_none(e.updated_at),
    }


def display_to_json(d: Optional[EmployeeDisplay]) -> Optional[dict[str, Any]]:
    if d is None:
        return None
    out: dict[str, Any] = {"id": d.employee_id, "firstName": d.first_name, "lastName": d.last_name}
    if d.email is not None:
        out["email"] = d.email
    if d.employment_type is not None:
        out["employmentType"] = d.employment_type.value
    if d.department is not None:
        out["department"] = d.department
    if d.position is not None:
        out["position"] = d.position
    return out
