from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import BadRequestError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        email = data.get("email") or ""
        password = data.get("password") or ""
        if not email or not password:
            raise BadRequestError("Email and password are required")

        s_user = container.auth_service.authenticate(email, password)

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        session["user_id"] = s_user.user_id
        session["role"] = s_user.role.value
        logger.info("User %s logged in as %s", s_user.user_id, s_user.role.value)

        return jsonify(
            {
                "id": s_user.user_id,
                "username": s_user.username,
                "role": s_user.role.value,
                "employeeId": s_user.employee_id,
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out successfully"})

    @app.route("/api/auth/profile", methods=["GET"], endpoint="auth_profile")
    @login_required
    def profile():
        account = container.auth_service.profile(int(session["user_id"]))
        return jsonify(
            {
                "id": account.user_id,
                "username": account.username,
                "email": account.email,
                "role": account.role.value,
                "employeeId": account.employee_id,
                "isActive": account.is_active,
            }
        )
