from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attachments.store import AssetStore, build_asset_store
from .attachments.uploader import AttachmentUploader
from .briefings.mongo_briefing_repository import MongoBriefingRepository
from .briefings.repository import BriefingRepository
from .briefings.service import BriefingService
from .database.connection import DatabaseConnection, MongoConfig
from .inventory.mongo_inventory_repository import MongoInventoryRepository
from .inventory.repository import InventoryRepository
from .inventory.service import InventoryService
from .shifts.mongo_shift_repository import MongoShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService
from .trainings.mongo_training_repository import MongoTrainingRepository
from .trainings.repository import TrainingRepository
from .trainings.service import TrainingService


@dataclass(frozen=True)
class Container:
    inventory_repo: InventoryRepository
    shifts_repo: ShiftRepository
    briefings_repo: BriefingRepository
    trainings_repo: TrainingRepository
    asset_store: AssetStore

    inventory_service: InventoryService
    shift_service: ShiftService
    briefing_service: BriefingService
    training_service: TrainingService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    inventory_repo: InventoryRepository,
    shifts_repo: ShiftRepository,
    briefings_repo: BriefingRepository,
    trainings_repo: TrainingRepository,
    asset_store: AssetStore,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services over any set of repositories (Mongo or in-memory)."""
    uploader = AttachmentUploader(asset_store)
    return Container(
        inventory_repo=inventory_repo,
        shifts_repo=shifts_repo,
        briefings_repo=briefings_repo,
        trainings_repo=trainings_repo,
        asset_store=asset_store,
        inventory_service=InventoryService(inventory_repo),
        shift_service=ShiftService(shifts_repo),
        briefing_service=BriefingService(briefings_repo, uploader),
        training_service=TrainingService(trainings_repo, uploader),
        conn=conn,
    )


def build_container(*, mongo_config: dict, cloudinary_config: dict) -> Container:
    config = MongoConfig(
        uri=str(mongo_config["uri"]),
        database=str(mongo_config["database"]),
        server_selection_timeout_ms=int(mongo_config.get("server_selection_timeout_ms", 5000)),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        inventory_repo=MongoInventoryRepository(conn),
        shifts_repo=MongoShiftRepository(conn),
        briefings_repo=MongoBriefingRepository(conn),
        trainings_repo=MongoTrainingRepository(conn),
        asset_store=build_asset_store(cloudinary_config),
        conn=conn,
    )
