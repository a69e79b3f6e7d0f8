from __future__ import annotations

from typing import Any

from ..common.datetime_utils import isoformat_or_none
from ..employees.serializers import display_to_json
from .model import PayrollRecord


def payroll_to_json(p: PayrollRecord) -> dict[str, Any]:
    out = {
        "id": p.payroll_id,
        "employeeId": p.employee_id,
        "month": p.month,
        "year": p.year,
        "baseSalary": float(p.base_salary),
        "allowances": float(p.allowances),
        "deductions": float(p.deductions),
        "bonus": float(p.bonus),
        "taxAmount": float(p.tax_amount),
        "netSalary": float(p.net_salary),
        "paymentStatus": p.payment_status.value,
        "paymentDate": isoformat_or_none(p.payment_date),
        "paymentMethod": p.payment_method.value,
        "paymentReference": p.payment_reference,
        "comments": p.comments,
        "createdAt": isoformat_or_none(p.created_at),
        "updatedAt": isoformat_or_none(p.updated_at),
    }
    if p.employee is not None:
        out["employee"] = display_to_json(p.employee)
    return out
