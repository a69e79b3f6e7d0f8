from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Domain entity: a login account.

    Note: plain data object, no database access here.
    """

    user_id: int
    username: str
    email: str
    password_hash: str
    role: Role
    employee_id: Optional[int] = None
    is_active: bool = True
