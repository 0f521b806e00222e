from datetime import date

import pytest
import requests

from src.operations_hub.operations_hub.client.base import ApiClient, ApiError, build_base_url, normalize_ids
from src.operations_hub.operations_hub.client.machines import (
    MachineClient,
    StatsPolicy,
    compute_machine_stats,
)
from src.operations_hub.operations_hub.client.resources import BriefingClient, InventoryClient, ResourceClient
from src.operations_hub.operations_hub.client.session import JsonFileStorage, MemoryStorage, SessionContext
from src.operations_hub.operations_hub.core.exceptions import ValidationError


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self._body = body
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class FakeSession:
    """Routes ``(METHOD, path)`` to canned responses and records each call."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def request(self, method, url, **kwargs):
        path = url.split("/api", 1)[1]
        self.calls.append((method, path, kwargs))
        result = self.routes.get((method, path))
        if isinstance(result, Exception):
            raise result
        if result is None:
            return FakeResponse(404, {"success": False, "message": "Not found"}, "Not Found")
        return result


def _api(routes, context=None):
    session = FakeSession(routes)
    return ApiClient("http://testserver/api", session=session, timeout=3, context=context), session


def test_build_base_url_default_and_override(monkeypatch):
    monkeypatch.delenv("API_BASE_URL", raising=False)
    assert build_base_url("dash.local") == "http://dash.local:5001/api"

    monkeypatch.setenv("API_BASE_URL", "https://ops.example.com/api/")
    assert build_base_url("ignored") == "https://ops.example.com/api"


def test_normalize_ids_copies_underscore_id():
    data = normalize_ids([{"_id": "abc", "nested": {"_id": "n1"}}, {"id": "keep", "_id": "other"}])

    assert data[0]["id"] == "abc"
    assert data[0]["nested"]["id"] == "n1"
    assert data[1]["id"] == "keep"


def test_unwrap_defaults_when_data_missing():
    assert ApiClient.unwrap({"success": True}, many=True) == []
    assert ApiClient.unwrap({"success": True}) == {}
    assert ApiClient.unwrap([{"_id": "1"}], many=True) == [{"_id": "1", "id": "1"}]


def test_request_sends_timeout_auth_header_and_cleans_params():
    context = SessionContext(MemoryStorage())
    context.sign_in("tok-1", {"name": "Manager Mia"})
    api, session = _api({("GET", "/inventory"): FakeResponse(200, {"success": True, "data": []})}, context)

    InventoryClient(api).list_items(department="all", search="", site="HQ")

    _, _, kwargs = session.calls[0]
    assert kwargs["timeout"] == 3
    assert kwargs["headers"] == {"Authorization": "Bearer tok-1"}
    assert kwargs["params"] == {"site": "HQ", "limit": 100, "page": 1}


def test_error_envelope_raises_api_error_with_status_and_message():
    api, _ = _api({("GET", "/shifts/x"): FakeResponse(404, {"success": False, "message": "Shift not found"})})

    with pytest.raises(ApiError) as info:
        api.get_data("/shifts/x")

    assert info.value.status == 404
    assert info.value.message == "Shift not found"


def test_network_error_becomes_api_error_without_status():
    api, _ = _api({("GET", "/health"): requests.ConnectionError("refused")})

    with pytest.raises(ApiError) as info:
        api.request("GET", "/health")

    assert info.value.status is None


def test_inventory_reads_degrade_on_failure():
    api, _ = _api({("GET", "/inventory"): FakeResponse(500, {"success": False, "message": "boom"})})
    client = InventoryClient(api)

    assert client.list_items() == []
    assert client.get_item("missing") is None


def test_adjust_stock_records_current_manager():
    context = SessionContext(MemoryStorage())
    context.sign_in("t", {"name": "Manager Mia"})
    api, session = _api(
        {("PATCH", "/inventory/i1/stock"): FakeResponse(200, {"success": True, "data": {"_id": "i1"}})}, context
    )

    item = InventoryClient(api).adjust_stock("i1", -2)

    assert item["id"] == "i1"
    assert session.calls[0][2]["json"] == {"quantity": -2, "user": "Manager Mia"}


def test_briefing_create_is_multipart_with_data_field():
    api, session = _api(
        {("POST", "/briefings"): FakeResponse(201, {"success": True, "data": {"_id": "b1", "id": "BRI001"}})}
    )

    created = BriefingClient(api).create_briefing({"site": "HQ"}, [("plan.pdf", b"%PDF", "application/pdf")])

    kwargs = session.calls[0][2]
    assert created["id"] == "BRI001"
    assert kwargs["data"] == {"data": '{"site": "HQ"}'}
    assert kwargs["files"] == [("attachments", ("plan.pdf", b"%PDF", "application/pdf"))]
    assert kwargs["json"] is None


def test_resource_client_only_knows_listed_resources():
    api, _ = _api({("GET", "/payments"): FakeResponse(200, [{"_id": "p1"}])})

    assert ResourceClient(api, "payments").list() == [{"_id": "p1", "id": "p1"}]
    with pytest.raises(ValueError):
        ResourceClient(api, "invoices-v2")


def test_session_context_with_json_file_storage(tmp_path):
    path = str(tmp_path / "session" / "auth.json")
    context = SessionContext(JsonFileStorage(path))

    context.sign_in("abc", {"email": "mia@example.com"})
    reloaded = SessionContext(JsonFileStorage(path))

    assert reloaded.token == "abc"
    assert reloaded.current_manager() == "mia@example.com"
    reloaded.sign_out()
    assert SessionContext(JsonFileStorage(path)).is_authenticated is False


MACHINES = [
    {"_id": "m1", "cost": 100, "quantity": 2, "status": "operational", "department": "paint",
     "nextMaintenanceDate": "2025-01-20"},
    {"_id": "m2", "cost": 50, "quantity": 1, "status": "maintenance", "location": "Bay 3",
     "nextMaintenanceDate": "2025-03-01"},
    {"cost": 10, "quantity": 5, "status": "out-of-service", "nextMaintenanceDate": "2024-12-31"},
]


def test_compute_machine_stats_is_pure_reduction():
    stats = compute_machine_stats(MACHINES, today=date(2025, 1, 1))

    assert stats.total_machines == 3
    assert stats.total_machine_value == 300
    assert (stats.operational_machines, stats.maintenance_machines, stats.out_of_service_machines) == (1, 1, 1)
    assert stats.average_machine_cost == 100
    assert stats.machines_by_department == {"paint": 1, "Unassigned": 2}
    assert stats.machines_by_location == {"Unassigned": 2, "Bay 3": 1}
    assert stats.upcoming_maintenance_count == 1


def test_compute_machine_stats_empty():
    stats = compute_machine_stats([], today=date(2025, 1, 1))
    assert stats.total_machines == 0
    assert stats.average_machine_cost == 0


def test_machine_stats_fall_back_to_local_reduction_when_remote_fails():
    api, session = _api(
        {
            ("GET", "/machines/stats"): FakeResponse(500, {"error": "broken"}, "Internal Server Error"),
            ("GET", "/machines"): FakeResponse(200, MACHINES),
        }
    )

    stats = MachineClient(api).stats(today=date(2025, 1, 1))

    assert stats.total_machines == 3
    assert [c[1] for c in session.calls] == ["/machines/stats", "/machines"]


def test_machine_stats_remote_result_used_when_available():
    remote = {"totalMachines": 9, "totalMachineValue": 900, "machinesByDepartment": {"paint": 9}}
    api, session = _api({("GET", "/machines/stats"): FakeResponse(200, remote)})

    stats = MachineClient(api).stats()

    assert stats.total_machines == 9
    assert stats.to_json()["machinesByDepartment"] == {"paint": 9}
    assert len(session.calls) == 1


def test_machine_stats_local_only_policy_skips_remote():
    api, session = _api({("GET", "/machines"): FakeResponse(200, MACHINES)})

    MachineClient(api, policy=StatsPolicy.LOCAL_ONLY).stats(today=date(2025, 1, 1))

    assert [c[1] for c in session.calls] == ["/machines"]


def test_machine_list_assigns_temporary_ids():
    api, _ = _api({("GET", "/machines"): FakeResponse(200, MACHINES)})

    machines = MachineClient(api).list_machines()

    assert [m["id"] for m in machines[:2]] == ["m1", "m2"]
    assert machines[2]["id"].startswith("temp-")


def test_get_machine_falls_back_to_list_on_server_error():
    api, _ = _api(
        {
            ("GET", "/machines/m2"): FakeResponse(500, {"message": "cast error"}, "Internal Server Error"),
            ("GET", "/machines"): FakeResponse(200, MACHINES),
        }
    )
    client = MachineClient(api)

    assert client.get_machine("m2")["status"] == "maintenance"
    with pytest.raises(ApiError, match="Machine not found with ID: zz"):
        client.get_machine("zz")
    with pytest.raises(ValidationError):
        client.get_machine("undefined")


def test_create_machine_requires_name_cost_and_purchase_date():
    api, session = _api({("POST", "/machines"): FakeResponse(201, {"_id": "m9", "name": "Lathe"})})
    client = MachineClient(api)

    with pytest.raises(ValidationError, match="Missing required fields"):
        client.create_machine({"name": "Lathe", "cost": 0, "purchaseDate": "2025-01-01"})

    created = client.create_machine({"name": "Lathe", "cost": "1200", "purchaseDate": "2025-01-01"})

    body = session.calls[0][2]["json"]
    assert created["id"] == "m9"
    assert body["cost"] == 1200.0
    assert body["quantity"] == 1
    assert body["status"] == "operational"


class PagedInventorySession(FakeSession):
    """Serves ``count`` inventory items in pages of the requested size."""

    def __init__(self, count):
        super().__init__({})
        self.rows = [{"_id": f"i{n}", "sku": f"SKU-{n}"} for n in range(count)]

    def request(self, method, url, **kwargs):
        self.calls.append((method, url.split("/api", 1)[1], kwargs))
        page, limit = kwargs["params"]["page"], kwargs["params"]["limit"]
        chunk = self.rows[(page - 1) * limit: page * limit]
        pages = -(-len(self.rows) // limit)
        return FakeResponse(200, {"success": True, "data": chunk, "total": len(self.rows), "page": page, "totalPages": pages})


def test_inventory_list_follows_every_page():
    session = PagedInventorySession(150)
    client = InventoryClient(ApiClient("http://testserver/api", session=session, timeout=3))

    items = client.list_items(site="HQ")

    assert len(items) == 150
    assert items[-1]["id"] == "i149"
    assert [c[2]["params"]["page"] for c in session.calls] == [1, 2]
    assert all(c[2]["params"]["site"] == "HQ" for c in session.calls)


def test_machine_stats_fall_back_when_remote_returns_no_data():
    api, session = _api(
        {
            ("GET", "/machines/stats"): FakeResponse(200, {"success": True}),
            ("GET", "/machines"): FakeResponse(200, MACHINES[:1]),
        }
    )

    stats = MachineClient(api).stats(today=date(2025, 1, 1))

    assert stats.total_machines == 1
    assert stats.total_machine_value == 200
    assert [c[1] for c in session.calls] == ["/machines/stats", "/machines"]


def test_create_machine_rejects_non_numeric_cost():
    api, session = _api({("POST", "/machines"): FakeResponse(201, {"_id": "m9"})})

    with pytest.raises(ValidationError, match="cost must be a number"):
        MachineClient(api).create_machine({"name": "Lathe", "cost": "lots", "purchaseDate": "2025-01-01"})
    assert session.calls == []
