from __future__ import annotations

from flask import Flask, request

from ..common.listing import ListQuery
from ..container import Container
from ..http.payloads import json_body, multipart_payload
from ..http.responses import api_errors, page_response, success


def register(app: Flask, container: Container) -> None:
    service = container.training_service

    @app.route("/api/trainings", methods=["GET"], endpoint="trainings_list")
    @api_errors("Error fetching training sessions")
    def trainings_list():
        page = service.list_trainings(ListQuery.from_args(request.args))
        return page_response(page, [t.to_json() for t in page.items])

    @app.route("/api/trainings/stats", methods=["GET"], endpoint="trainings_stats")
    @api_errors("Error fetching statistics")
    def trainings_stats():
        return success(service.statistics())

    @app.route("/api/trainings/<session_id>", methods=["GET"], endpoint="trainings_get")
    @api_errors("Error fetching training session")
    def trainings_get(session_id: str):
        return success(service.get_training(session_id).to_json())

    @app.route("/api/trainings", methods=["POST"], endpoint="trainings_create")
    @api_errors("Error creating training session")
    def trainings_create():
        payload, files = multipart_payload("training")
        session = service.create_training(payload, files)
        return success(session.to_json(), message="Training session created successfully", status=201)

    @app.route("/api/trainings/<session_id>", methods=["PUT"], endpoint="trainings_update")
    @api_errors("Error updating training session")
    def trainings_update(session_id: str):
        session = service.update_training(session_id, json_body())
        return success(session.to_json(), message="Training session updated successfully")

    @app.route("/api/trainings/<session_id>", methods=["DELETE"], endpoint="trainings_delete")
    @api_errors("Error deleting training session")
    def trainings_delete(session_id: str):
        service.delete_training(session_id)
        return success(message="Training session deleted successfully")

    @app.route("/api/trainings/<session_id>/status", methods=["PATCH"], endpoint="trainings_status")
    @api_errors("Error updating training status")
    def trainings_status(session_id: str):
        session = service.update_status(session_id, json_body().get("status"))
        return success(session.to_json(), message="Training status updated successfully")

    @app.route("/api/trainings/<session_id>/feedback", methods=["POST"], endpoint="trainings_feedback")
    @api_errors("Error adding feedback")
    def trainings_feedback(session_id: str):
        session = service.add_feedback(session_id, json_body())
        return success(session.to_json(), message="Feedback added successfully")
