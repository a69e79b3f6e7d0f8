from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for authorization."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    HR = "hr"
    ACCOUNTS = "accounts"
    EMPLOYEE = "employee"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    WFH = "wfh"
    OFFICE = "office"


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class AttendanceStatus(str, Enum):
    """Day status stored on an attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LEAVE = "leave"
    WFH = "wfh"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"


REPORT_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.HR})
