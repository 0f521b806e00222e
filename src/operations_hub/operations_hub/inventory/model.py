from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import isoformat, parse_datetime
from ..common.listing import ListingSpec
from ..common.validators import optional_text, require_choice, require_non_empty, require_number
from ..core.constants import DEFAULT_REORDER_LEVEL
from ..core.enums import Department
from ..core.exceptions import ValidationError

LISTING = ListingSpec(
    equality={"department": Department, "category": None, "site": None},
    search_fields=("name", "sku", "category", "supplier", "site", "assignedManager"),
)

_TEXT_FIELDS = {
    "name": "Name",
    "category": "Category",
    "site": "Site",
    "assignedManager": "Assigned manager",
    "supplier": "Supplier",
}


@dataclass(frozen=True)
class ChangeHistoryEntry:
    date: str
    change: str
    user: str
    quantity: float

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ChangeHistoryEntry":
        return cls(
            date=str(doc.get("date") or ""),
            change=doc.get("change") or "",
            user=doc.get("user") or "",
            quantity=doc.get("quantity") or 0,
        )

    def to_document(self) -> dict:
        return {"date": self.date, "change": self.change, "user": self.user, "quantity": self.quantity}


@dataclass(frozen=True)
class InventoryItem:
    """Domain entity for a stocked article; ``sku`` is the natural key."""

    item_id: str
    sku: str
    name: str
    department: str
    category: str
    site: str
    assigned_manager: str
    quantity: float
    price: float
    cost_price: float
    supplier: str
    reorder_level: float
    description: Optional[str] = None
    change_history: tuple[ChangeHistoryEntry, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.reorder_level

    @property
    def stock_value(self) -> float:
        return self.quantity * self.cost_price

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "InventoryItem":
        return cls(
            item_id=str(doc["_id"]),
            sku=doc.get("sku") or "",
            name=doc.get("name") or "",
            department=doc.get("department") or "",
            category=doc.get("category") or "",
            site=doc.get("site") or "",
            assigned_manager=doc.get("assignedManager") or "",
            quantity=doc.get("quantity") or 0,
            price=doc.get("price") or 0,
            cost_price=doc.get("costPrice") or 0,
            supplier=doc.get("supplier") or "",
            reorder_level=doc.get("reorderLevel", DEFAULT_REORDER_LEVEL),
            description=doc.get("description"),
            change_history=tuple(ChangeHistoryEntry.from_document(e) for e in doc.get("changeHistory") or []),
            created_at=parse_datetime(doc.get("createdAt")),
            updated_at=parse_datetime(doc.get("updatedAt")),
        )

    def to_json(self) -> dict:
        return {
            "_id": self.item_id,
            "sku": self.sku,
            "name": self.name,
            "department": self.department,
            "category": self.category,
            "site": self.site,
            "assignedManager": self.assigned_manager,
            "quantity": self.quantity,
            "price": self.price,
            "costPrice": self.cost_price,
            "supplier": self.supplier,
            "reorderLevel": self.reorder_level,
            "description": self.description,
            "changeHistory": [e.to_document() for e in self.change_history],
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


def _history_entry(raw: Any) -> dict:
    if not isinstance(raw, Mapping):
        raise ValidationError("Change history entries must be objects")
    return {
        "date": require_non_empty(raw.get("date"), "Change date"),
        "change": require_non_empty(raw.get("change"), "Change"),
        "user": require_non_empty(raw.get("user"), "Change user"),
        "quantity": require_number(raw.get("quantity"), "Change quantity"),
    }


def validate_inventory_fields(payload: Mapping[str, Any], *, partial: bool = False) -> dict:
    """Schema rules for an inventory document.

    With ``partial`` only the keys present in ``payload`` are checked and
    returned, so updates re-run the same rules as creates.
    """

    def wanted(key: str) -> bool:
        return not partial or key in payload

    fields: dict[str, Any] = {}
    if wanted("sku"):
        fields["sku"] = require_non_empty(payload.get("sku"), "SKU").upper()
    for key, label in _TEXT_FIELDS.items():
        if wanted(key):
            fields[key] = require_non_empty(payload.get(key), label)
    if wanted("department"):
        fields["department"] = require_choice(payload.get("department"), Department, "Department").value
    if wanted("quantity"):
        fields["quantity"] = require_number(payload.get("quantity"), "Quantity", minimum=0, default=None if partial else 0)
    if wanted("price"):
        fields["price"] = require_number(payload.get("price"), "Price", minimum=0)
    if wanted("costPrice"):
        fields["costPrice"] = require_number(payload.get("costPrice"), "Cost price", minimum=0)
    if wanted("reorderLevel"):
        fields["reorderLevel"] = require_number(
            payload.get("reorderLevel"), "Reorder level", minimum=0, default=None if partial else DEFAULT_REORDER_LEVEL
        )
    if wanted("description"):
        fields["description"] = optional_text(payload.get("description"))
    if "changeHistory" in payload:
        history = payload.get("changeHistory") or []
        if not isinstance(history, list):
            raise ValidationError("Change history must be a list")
        fields["changeHistory"] = [_history_entry(e) for e in history]
    elif not partial:
        fields["changeHistory"] = []
    return fields
