from __future__ import annotations

from flask import Flask, request

from ..common.listing import ListQuery
from ..container import Container
from ..http.payloads import json_body, multipart_payload
from ..http.responses import api_errors, page_response, success


def register(app: Flask, container: Container) -> None:
    service = container.briefing_service

    @app.route("/api/briefings", methods=["GET"], endpoint="briefings_list")
    @api_errors("Error fetching staff briefings")
    def briefings_list():
        page = service.list_briefings(ListQuery.from_args(request.args))
        return page_response(page, [b.to_json() for b in page.items])

    @app.route("/api/briefings/stats", methods=["GET"], endpoint="briefings_stats")
    @api_errors("Error fetching statistics")
    def briefings_stats():
        return success(service.statistics())

    @app.route("/api/briefings/<briefing_id>", methods=["GET"], endpoint="briefings_get")
    @api_errors("Error fetching staff briefing")
    def briefings_get(briefing_id: str):
        return success(service.get_briefing(briefing_id).to_json())

    @app.route("/api/briefings", methods=["POST"], endpoint="briefings_create")
    @api_errors("Error creating staff briefing")
    def briefings_create():
        payload, files = multipart_payload("briefing")
        briefing = service.create_briefing(payload, files)
        return success(briefing.to_json(), message="Staff briefing created successfully", status=201)

    @app.route("/api/briefings/<briefing_id>", methods=["PUT"], endpoint="briefings_update")
    @api_errors("Error updating staff briefing")
    def briefings_update(briefing_id: str):
        briefing = service.update_briefing(briefing_id, json_body())
        return success(briefing.to_json(), message="Staff briefing updated successfully")

    @app.route("/api/briefings/<briefing_id>", methods=["DELETE"], endpoint="briefings_delete")
    @api_errors("Error deleting staff briefing")
    def briefings_delete(briefing_id: str):
        service.delete_briefing(briefing_id)
        return success(message="Staff briefing deleted successfully")

    @app.route(
        "/api/briefings/<briefing_id>/action-items/<item_id>",
        methods=["PATCH"],
        endpoint="briefings_action_item_status",
    )
    @api_errors("Error updating action item")
    def briefings_action_item_status(briefing_id: str, item_id: str):
        briefing = service.update_action_item_status(briefing_id, item_id, json_body().get("status"))
        return success(briefing.to_json(), message="Action item status updated successfully")
