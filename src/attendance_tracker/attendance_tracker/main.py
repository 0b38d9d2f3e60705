from __future__ import annotations

import importlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .common.web import ok, register_error_handlers, register_request_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, describe_target, ensure_demo_teachers, list_tables
from .teachers.controller import register as register_teachers

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
    # Flask's dev server logs every request line; we log our own.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("mysql.connector").setLevel(logging.WARNING)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("Starting attendance-tracker settings=%s db=%s", settings_module, describe_target(db_config))

    if container is None:
        _prepare_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET", app.secret_key),
            token_ttl_hours=int(getattr(settings, "TOKEN_TTL_HOURS", 24 * 7)),
        )

    register_error_handlers(app)
    register_request_logging(app)

    register_teachers(app, container)
    register_classes(app, container)
    register_attendance(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok(status="API is running", timestamp=datetime.now(timezone.utc).isoformat(), environment=settings_module)

    return app


def _prepare_database(settings, db_config: dict) -> None:
    root = Path(__file__).resolve().parents[3] / "database"

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=root / "schema.sql")
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=root / "seed.sql")
        ensure_demo_teachers(db_config)
        logger.info("Demo seed ready")
