from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_caller, json_body, login_required, roles_required
from ..container import Container
from ..core.enums import Role
from .serializers import employee_fields_from_json, employee_to_json

HR_ROLES = (Role.SUPER_ADMIN, Role.ADMIN, Role.HR)


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @roles_required(*HR_ROLES)
    def list_employees():
        return jsonify([employee_to_json(e) for e in service.list_all()])

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def get_employee(employee_id: int):
        employee = service.get(employee_id, caller=current_caller())
        return jsonify(employee_to_json(employee))

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @roles_required(*HR_ROLES)
    def create_employee():
        employee = service.create(**employee_fields_from_json(json_body()))
        return jsonify(employee_to_json(employee)), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @roles_required(*HR_ROLES)
    def update_employee(employee_id: int):
        employee = service.update(employee_id, **employee_fields_from_json(json_body()))
        return jsonify(employee_to_json(employee))

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def delete_employee(employee_id: int):
        service.delete(employee_id)
        return jsonify({"message": "Employee removed"})
