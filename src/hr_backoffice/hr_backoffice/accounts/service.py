from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_enum, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError
from .model import Account
from .repository import AccountRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    role: Role
    employee_id: Optional[int]


class AuthService:
    """Use case: authenticate an account (login) and load the caller profile."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def authenticate(self, email: str, password: str) -> SessionUser:
        account = self._accounts.get_by_email((email or "").strip().lower())
        if not account:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", account.email)
            raise AuthenticationError("Invalid credentials")

        if not account.is_active:
            raise AuthorizationError("Account is deactivated")

        return SessionUser(
            user_id=account.user_id,
            username=account.username,
            role=account.role,
            employee_id=account.employee_id,
        )

    def profile(self, user_id: int) -> Account:
        account = self._accounts.get_by_id(int(user_id))
        if not account:
            raise NotFoundError("User not found")
        return account

    def register(self, *, username: str, email: str, password: str, role: Role | str = Role.EMPLOYEE) -> int:
        """Create a login account; used by ``scripts/create_account.py``."""

        username = require_non_empty(username, "Username")
        email = require_email(email)
        require_min_length(password, "Password", 6)
        role = require_enum(role, Role, "role")

        if self._accounts.get_by_email(email):
            raise ConflictError("User already exists")

        return self._accounts.create_account(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
