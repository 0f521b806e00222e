"""Machine API wrapper with a two-tier statistics source.

``MachineClient.stats`` asks the server first and, under the default policy,
reduces the machine list locally when that call fails. ``compute_machine_stats``
is the pure local reduction.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import parse_datetime
from ..common.validators import require_number
from ..core.constants import UPCOMING_MAINTENANCE_DAYS
from ..core.enums import MachineStatus
from ..core.exceptions import ValidationError
from .base import ApiClient, ApiError

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


class StatsPolicy(str, Enum):
    REMOTE_WITH_LOCAL_FALLBACK = "remote_with_local_fallback"
    LOCAL_ONLY = "local_only"


@dataclass(frozen=True)
class MachineStats:
    total_machines: int = 0
    total_machine_value: float = 0
    operational_machines: int = 0
    maintenance_machines: int = 0
    out_of_service_machines: int = 0
    average_machine_cost: float = 0
    machines_by_department: dict[str, int] = field(default_factory=dict)
    machines_by_location: dict[str, int] = field(default_factory=dict)
    upcoming_maintenance_count: int = 0

    _WIRE_NAMES = {
        "total_machines": "totalMachines",
        "total_machine_value": "totalMachineValue",
        "operational_machines": "operationalMachines",
        "maintenance_machines": "maintenanceMachines",
        "out_of_service_machines": "outOfServiceMachines",
        "average_machine_cost": "averageMachineCost",
        "machines_by_department": "machinesByDepartment",
        "machines_by_location": "machinesByLocation",
        "upcoming_maintenance_count": "upcomingMaintenanceCount",
    }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MachineStats":
        kwargs = {attr: data[wire] for attr, wire in cls._WIRE_NAMES.items() if wire in data}
        return cls(**kwargs)

    def to_json(self) -> dict:
        return {self._WIRE_NAMES[k]: v for k, v in asdict(self).items()}


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def compute_machine_stats(machines: Iterable[Mapping[str, Any]], today: Optional[date] = None) -> MachineStats:
    today = today or date.today()
    horizon = today + timedelta(days=UPCOMING_MAINTENANCE_DAYS)

    machines = list(machines)
    total = len(machines)
    total_value = sum(_number(m.get("cost")) * _number(m.get("quantity")) for m in machines)

    by_status = {s: 0 for s in MachineStatus}
    by_department: dict[str, int] = {}
    by_location: dict[str, int] = {}
    upcoming = 0
    for m in machines:
        try:
            by_status[MachineStatus(m.get("status"))] += 1
        except ValueError:
            pass
        department = m.get("department") or UNASSIGNED
        by_department[department] = by_department.get(department, 0) + 1
        location = m.get("location") or UNASSIGNED
        by_location[location] = by_location.get(location, 0) + 1

        next_due = parse_datetime(m.get("nextMaintenanceDate"))
        if next_due is not None and today <= next_due.date() <= horizon:
            upcoming += 1

    return MachineStats(
        total_machines=total,
        total_machine_value=total_value,
        operational_machines=by_status[MachineStatus.OPERATIONAL],
        maintenance_machines=by_status[MachineStatus.MAINTENANCE],
        out_of_service_machines=by_status[MachineStatus.OUT_OF_SERVICE],
        average_machine_cost=total_value / total if total else 0,
        machines_by_department=by_department,
        machines_by_location=by_location,
        upcoming_maintenance_count=upcoming,
    )


def _with_id(machine: dict) -> dict:
    if not machine.get("id"):
        machine = dict(machine, id=f"temp-{uuid.uuid4().hex}")
    return machine


def _require_id(machine_id: str, action: str) -> None:
    if not machine_id or machine_id == "undefined":
        raise ValidationError(f"Invalid machine ID{action}")


class MachineClient:
    def __init__(self, api: ApiClient, *, policy: StatsPolicy = StatsPolicy.REMOTE_WITH_LOCAL_FALLBACK):
        self._api = api
        self.policy = policy

    def list_machines(self, **filters: Any) -> list[dict]:
        try:
            machines = self._api.get_data("/machines", params=filters, many=True)
        except ApiError as e:
            logger.error("Failed to fetch machines: %s", e)
            return []
        return [_with_id(m) for m in machines]

    def search(self, query: str) -> list[dict]:
        try:
            machines = self._api.get_data("/machines/search", params={"q": query}, many=True)
        except ApiError as e:
            logger.error("Machine search failed: %s", e)
            return []
        return [_with_id(m) for m in machines]

    def get_machine(self, machine_id: str) -> dict:
        _require_id(machine_id, "")
        try:
            machine = self._api.get_data(f"/machines/{machine_id}")
        except ApiError as e:
            if e.status not in (404, 500):
                raise
            # Some records are only reachable through the list endpoint.
            for m in self.list_machines():
                if machine_id in (m.get("id"), str(m.get("_id") or "")):
                    return m
            raise ApiError(f"Machine not found with ID: {machine_id}", 404, e.payload) from e
        if not machine.get("id"):
            machine["id"] = machine_id
        return machine

    def create_machine(self, payload: Mapping[str, Any]) -> dict:
        if not payload.get("name") or not payload.get("cost") or not payload.get("purchaseDate"):
            raise ValidationError("Missing required fields: name, cost, purchaseDate")

        body = {
            "name": payload["name"],
            "cost": float(require_number(payload["cost"], "cost")),
            "purchaseDate": payload["purchaseDate"],
            "quantity": int(_number(payload.get("quantity"))) or 1,
            "status": payload.get("status") or MachineStatus.OPERATIONAL.value,
        }
        for key in ("description", "location", "manufacturer", "model", "serialNumber", "department", "assignedTo"):
            body[key] = payload.get(key) or ""
        for key in ("lastMaintenanceDate", "nextMaintenanceDate"):
            if payload.get(key):
                body[key] = payload[key]
        return self._api.send("POST", "/machines", json=body)

    def update_machine(self, machine_id: str, payload: Mapping[str, Any]) -> dict:
        _require_id(machine_id, " for update")
        return self._api.send("PUT", f"/machines/{machine_id}", json=dict(payload))

    def delete_machine(self, machine_id: str) -> None:
        _require_id(machine_id, " for deletion")
        self._api.request("DELETE", f"/machines/{machine_id}")

    def add_maintenance_record(self, machine_id: str, record: Mapping[str, Any]) -> dict:
        _require_id(machine_id, " for maintenance")
        return self._api.send("POST", f"/machines/{machine_id}/maintenance", json=dict(record))

    def test_connection(self) -> bool:
        try:
            self._api.request("GET", "/health")
        except ApiError as e:
            logger.error("Backend connection test failed: %s", e)
            return False
        return True

    def stats(self, *, today: Optional[date] = None) -> MachineStats:
        if self.policy is StatsPolicy.REMOTE_WITH_LOCAL_FALLBACK:
            try:
                remote = self._api.get_data("/machines/stats")
            except ApiError as e:
                logger.warning("Machine stats endpoint failed (%s); computing locally", e)
            else:
                if isinstance(remote, dict) and remote:
                    return MachineStats.from_json(remote)
                logger.warning("Machine stats endpoint returned no data; computing locally")
        return compute_machine_stats(self.list_machines(), today)
