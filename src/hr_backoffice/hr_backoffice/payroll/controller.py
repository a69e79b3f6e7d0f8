from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.web import json_body, login_required, optional_int, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import BadRequestError
from .serializers import payroll_to_json


def _payment_date(value):
    if value in (None, ""):
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise BadRequestError("Valid payment date is required")


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_create")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN, Role.ACCOUNTS)
    def create_payroll():
        data = json_body()
        employee_id = optional_int(data.get("employeeId"), "employee id")
        if employee_id is None:
            raise BadRequestError("Employee id is required")
        record = service.create(
            employee_id=employee_id,
            month=data.get("month"),
            year=data.get("year"),
            base_salary=data.get("baseSalary"),
            allowances=data.get("allowances"),
            deductions=data.get("deductions"),
            bonus=data.get("bonus"),
            tax_amount=data.get("taxAmount"),
            payment_method=data.get("paymentMethod"),
            comments=data.get("comments"),
        )
        return jsonify(payroll_to_json(record)), 201

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN, Role.ACCOUNTS, Role.HR)
    def list_payroll():
        records = service.list(
            month=request.args.get("month"),
            year=request.args.get("year"),
            payment_status=request.args.get("status"),
        )
        return jsonify([payroll_to_json(p) for p in records])

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @login_required
    def get_payroll(payroll_id: int):
        return jsonify(payroll_to_json(service.get(payroll_id)))

    @app.route("/api/payroll/employee/<int:employee_id>", methods=["GET"], endpoint="payroll_by_employee")
    @login_required
    def payroll_by_employee(employee_id: int):
        return jsonify([payroll_to_json(p) for p in service.get_by_employee(employee_id)])

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["PATCH"], endpoint="payroll_status")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN, Role.ACCOUNTS)
    def update_status(payroll_id: int):
        data = json_body()
        record = service.update_status(
            payroll_id,
            data.get("paymentStatus"),
            payment_date=_payment_date(data.get("paymentDate")),
            payment_reference=data.get("paymentReference"),
        )
        return jsonify(payroll_to_json(record))

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def delete_payroll(payroll_id: int):
        service.delete(payroll_id)
        return jsonify({"message": "Payroll record removed"})
