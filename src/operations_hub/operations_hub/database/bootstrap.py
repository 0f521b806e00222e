from __future__ import annotations

import logging

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from ..common.datetime_utils import utcnow

logger = logging.getLogger(__name__)

INVENTORY_COLLECTION = "inventory"
SHIFTS_COLLECTION = "shifts"
BRIEFINGS_COLLECTION = "staffbriefings"
TRAININGS_COLLECTION = "trainingsessions"


def ensure_indexes(db: Database) -> None:
    """Create indexes the services rely on (idempotent)."""
    db[INVENTORY_COLLECTION].create_index([("sku", ASCENDING)], unique=True, name="sku_unique")
    db[INVENTORY_COLLECTION].create_index([("createdAt", DESCENDING)], name="created_desc")

    db[SHIFTS_COLLECTION].create_index([("createdAt", DESCENDING)], name="created_desc")

    # Display ids are count-based and may collide under concurrent creates,
    # so they are indexed for lookup only.
    for name in (BRIEFINGS_COLLECTION, TRAININGS_COLLECTION):
        db[name].create_index([("id", ASCENDING)], name="display_id")
        db[name].create_index([("date", DESCENDING), ("createdAt", DESCENDING)], name="date_created_desc")

    logger.info("Indexes ready on %s", db.name)


def seed_demo_data(db: Database) -> None:
    """Insert a few shifts and inventory items when the collections are empty."""
    now = utcnow()

    if db[SHIFTS_COLLECTION].count_documents({}) == 0:
        db[SHIFTS_COLLECTION].insert_many(
            [
                {"name": "Morning", "startTime": "06:00", "endTime": "14:00", "employees": [], "createdAt": now, "updatedAt": now},
                {"name": "Evening", "startTime": "14:00", "endTime": "22:00", "employees": [], "createdAt": now, "updatedAt": now},
            ]
        )
        logger.info("Seeded demo shifts")

    if db[INVENTORY_COLLECTION].count_documents({}) == 0:
        db[INVENTORY_COLLECTION].insert_many(
            [
                {
                    "sku": "CLN-001",
                    "name": "Floor cleaner 5L",
                    "department": "cleaning",
                    "category": "chemicals",
                    "site": "Head Office",
                    "assignedManager": "Facility Manager",
                    "quantity": 40,
                    "price": 12.5,
                    "costPrice": 9.0,
                    "supplier": "CleanCo",
                    "reorderLevel": 10,
                    "description": "",
                    "changeHistory": [],
                    "createdAt": now,
                    "updatedAt": now,
                },
                {
                    "sku": "TLS-014",
                    "name": "Cordless drill",
                    "department": "tools",
                    "category": "power tools",
                    "site": "Warehouse",
                    "assignedManager": "Maintenance Lead",
                    "quantity": 3,
                    "price": 120.0,
                    "costPrice": 95.0,
                    "supplier": "ToolHouse",
                    "reorderLevel": 5,
                    "description": "",
                    "changeHistory": [],
                    "createdAt": now,
                    "updatedAt": now,
                },
            ]
        )
        logger.info("Seeded demo inventory")


def list_collections(db: Database) -> list[str]:
    return sorted(db.list_collection_names())
