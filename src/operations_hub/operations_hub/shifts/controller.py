from __future__ import annotations

from flask import Flask, request

from ..common.listing import ListQuery
from ..core.constants import MAX_PAGE_LIMIT
from ..container import Container
from ..http.payloads import json_body
from ..http.responses import api_errors, page_response, success


def register(app: Flask, container: Container) -> None:
    service = container.shift_service

    @app.route("/api/shifts", methods=["GET"], endpoint="shifts_list")
    @api_errors("Error fetching shifts")
    def shifts_list():
        query = ListQuery.from_args(request.args, default_limit=MAX_PAGE_LIMIT)
        page = service.list_shifts(query)
        return page_response(page, [s.to_json() for s in page.items])

    @app.route("/api/shifts/stats", methods=["GET"], endpoint="shifts_stats")
    @api_errors("Error fetching shift statistics")
    def shifts_stats():
        return success(service.statistics())

    @app.route("/api/shifts/<shift_id>", methods=["GET"], endpoint="shifts_get")
    @api_errors("Error fetching shift")
    def shifts_get(shift_id: str):
        return success(service.get_shift(shift_id).to_json())

    @app.route("/api/shifts", methods=["POST"], endpoint="shifts_create")
    @api_errors("Error creating shift")
    def shifts_create():
        shift = service.create_shift(json_body())
        return success(shift.to_json(), message="Shift created successfully", status=201)

    @app.route("/api/shifts/<shift_id>", methods=["PUT"], endpoint="shifts_update")
    @api_errors("Error updating shift")
    def shifts_update(shift_id: str):
        shift = service.update_shift(shift_id, json_body())
        return success(shift.to_json(), message="Shift updated successfully")

    @app.route("/api/shifts/<shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    @api_errors("Error deleting shift")
    def shifts_delete(shift_id: str):
        service.delete_shift(shift_id)
        return success(message="Shift deleted successfully")

    @app.route("/api/shifts/<shift_id>/assign", methods=["POST", "PATCH"], endpoint="shifts_assign")
    @api_errors("Error assigning employee")
    def shifts_assign(shift_id: str):
        shift = service.assign_employee(shift_id, json_body().get("employeeId"))
        return success(shift.to_json(), message="Employee assigned successfully")

    @app.route("/api/shifts/<shift_id>/remove", methods=["POST", "PATCH"], endpoint="shifts_remove")
    @api_errors("Error removing employee")
    def shifts_remove(shift_id: str):
        shift = service.remove_employee(shift_id, json_body().get("employeeId"))
        return success(shift.to_json(), message="Employee removed successfully")
