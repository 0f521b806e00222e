from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.operations_hub.operations_hub.database.bootstrap import ensure_indexes, list_collections
from src.operations_hub.operations_hub.database.connection import DatabaseConnection, MongoConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    mongo_config = dict(settings.MONGO_CONFIG)

    conn = DatabaseConnection.get_instance(MongoConfig(uri=mongo_config["uri"], database=mongo_config["database"]))
    try:
        db = conn.database()
        ensure_indexes(db)
        collections = list_collections(db)
    finally:
        conn.close()

    print(f"OK: Indexes ready -> {mongo_config['database']} (collections={len(collections)})")


if __name__ == "__main__":
    main()
