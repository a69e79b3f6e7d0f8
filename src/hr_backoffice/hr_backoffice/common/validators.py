from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.constants import MAX_AMOUNT, MONEY_QUANTUM
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"Valid {field_name.lower()} is required")
    return value.lower()


def require_enum(value, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Valid {field_name} is required")


def require_number(value, field_name: str, *, minimum: Optional[Decimal] = None) -> Decimal:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = number.quantize(MONEY_QUANTUM)
    except InvalidOperation:
        raise ValidationError(f"{field_name} is out of range")
    if abs(number) >= MAX_AMOUNT:
        raise ValidationError(f"{field_name} is out of range")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    return number


def optional_number(value, field_name: str) -> Decimal:
    """Missing amounts count as zero."""
    if value is None or value == "":
        return Decimal("0.00")
    return require_number(value, field_name)


def require_int_range(value, field_name: str, *, minimum: int, maximum: Optional[int] = None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Valid {field_name} is required")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Valid {field_name} is required")
    if number < minimum or (maximum is not None and number > maximum):
        raise ValidationError(f"Valid {field_name} is required")
    return number


def require_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"Valid {field_name} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"Valid {field_name} is required")


def optional_date(value, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return require_date(value, field_name)
