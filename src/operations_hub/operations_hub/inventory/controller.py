from __future__ import annotations

from flask import Flask, request

from ..common.listing import ListQuery
from ..core.constants import MAX_PAGE_LIMIT
from ..container import Container
from ..http.payloads import json_body
from ..http.responses import api_errors, page_response, success


def register(app: Flask, container: Container) -> None:
    service = container.inventory_service

    @app.route("/api/inventory", methods=["GET"], endpoint="inventory_list")
    @api_errors("Failed to fetch items")
    def inventory_list():
        query = ListQuery.from_args(request.args, default_limit=MAX_PAGE_LIMIT)
        page = service.list_items(query)
        return page_response(page, [i.to_json() for i in page.items])

    @app.route("/api/inventory/stats", methods=["GET"], endpoint="inventory_stats")
    @api_errors("Failed to fetch stats")
    def inventory_stats():
        return success(service.statistics())

    @app.route("/api/inventory/low-stock", methods=["GET"], endpoint="inventory_low_stock")
    @api_errors("Failed to fetch low stock items")
    def inventory_low_stock():
        return success([i.to_json() for i in service.low_stock_items()])

    @app.route("/api/inventory/<item_id>", methods=["GET"], endpoint="inventory_get")
    @api_errors("Failed to fetch item")
    def inventory_get(item_id: str):
        return success(service.get_item(item_id).to_json())

    @app.route("/api/inventory", methods=["POST"], endpoint="inventory_create")
    @api_errors("Failed to create item")
    def inventory_create():
        item = service.create_item(json_body())
        return success(item.to_json(), message="Item created successfully", status=201)

    @app.route("/api/inventory/<item_id>", methods=["PUT"], endpoint="inventory_update")
    @api_errors("Failed to update item")
    def inventory_update(item_id: str):
        item = service.update_item(item_id, json_body())
        return success(item.to_json(), message="Item updated successfully")

    @app.route("/api/inventory/<item_id>", methods=["DELETE"], endpoint="inventory_delete")
    @api_errors("Failed to delete item")
    def inventory_delete(item_id: str):
        service.delete_item(item_id)
        return success({"id": item_id}, message="Item deleted successfully")

    @app.route("/api/inventory/<item_id>/stock", methods=["PATCH"], endpoint="inventory_adjust_stock")
    @api_errors("Failed to adjust stock")
    def inventory_adjust_stock(item_id: str):
        body = json_body()
        item = service.adjust_stock(item_id, delta=body.get("quantity"), user=body.get("user"), change=body.get("change"))
        return success(item.to_json(), message="Stock updated successfully")
