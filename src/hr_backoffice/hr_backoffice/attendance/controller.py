from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import optional_date, require_date
from ..common.web import current_caller, json_body, login_required, optional_int, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import BadRequestError
from .serializers import parse_location, record_to_json, summary_to_json


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        data = json_body()
        record = service.check_in(
            current_caller(),
            employee_id=optional_int(data.get("employeeId"), "employee id"),
            location=parse_location(data.get("location")),
        )
        return jsonify(record_to_json(record)), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        data = json_body()
        record = service.check_out(
            current_caller(),
            employee_id=optional_int(data.get("employeeId"), "employee id"),
            location=parse_location(data.get("location")),
        )
        return jsonify(record_to_json(record))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        record = service.get_today(
            current_caller(),
            employee_id=optional_int(request.args.get("employeeId"), "employee id"),
        )
        return jsonify(record_to_json(record) if record else None)

    @app.route("/api/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="attendance_by_employee")
    @login_required
    def by_employee(employee_id: int):
        records = service.get_by_employee(
            employee_id,
            start=optional_date(request.args.get("startDate"), "start date"),
            end=optional_date(request.args.get("endDate"), "end date"),
        )
        return jsonify([record_to_json(r) for r in records])

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN, Role.HR)
    def summary():
        rows = container.report_service.get_summary(
            start=optional_date(request.args.get("startDate"), "start date"),
            end=optional_date(request.args.get("endDate"), "end date"),
            current_role=current_caller().role,
        )
        return jsonify([summary_to_json(s) for s in rows])

    @app.route("/api/attendance/status", methods=["POST"], endpoint="attendance_status")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN, Role.HR)
    def set_status():
        data = json_body()
        employee_id = optional_int(data.get("employeeId"), "employee id")
        if employee_id is None:
            raise BadRequestError("Employee id is required")
        record = service.record_status(
            employee_id,
            require_date(data.get("date"), "date"),
            data.get("status"),
            notes=data.get("notes"),
        )
        return jsonify(record_to_json(record))
