from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_MAX_UPLOAD_MB
from .core.logging_setup import configure_logging
from .database.bootstrap import ensure_indexes, list_collections, seed_demo_data
from .http.responses import success
from .inventory.controller import register as register_inventory
from .shifts.controller import register as register_shifts
from .briefings.controller import register as register_briefings
from .trainings.controller import register as register_trainings

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory; pass ``container`` to run over in-memory repositories."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    max_upload_mb = int(getattr(settings, "MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB))
    app.config["MAX_UPLOAD_BYTES"] = max_upload_mb * 1024 * 1024

    if container is None:
        mongo_config = getattr(settings, "MONGO_CONFIG")
        logger.info(
            "Starting with settings=%s db=%s",
            settings_module,
            mongo_config.get("database"),
        )
        container = build_container(
            mongo_config=mongo_config,
            cloudinary_config=getattr(settings, "CLOUDINARY_CONFIG", {}),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            db = container.conn.database()
            ensure_indexes(db)
            logger.info("Collections: %s", ", ".join(list_collections(db)) or "(none)")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_demo_data(container.conn.database())

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
        return response

    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        return success(message="Operations Hub API is running")

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return success({"status": "ok", "environment": settings_module.rsplit(".", 1)[-1]})

    register_inventory(app, container)
    register_shifts(app, container)
    register_briefings(app, container)
    register_trainings(app, container)

    return app
