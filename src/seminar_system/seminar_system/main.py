from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import load_settings

from .archives.controller import register as register_archives
from .certificates.controller import register as register_certificates
from .container import Container, build_container
from .core.constants import MAX_MATERIAL_BYTES
from .core.log import configure_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin_user, list_tables
from .feedback.controller import register as register_feedback
from .notifications.controller import register as register_notifications
from .registrations.controller import register as register_registrations
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .seminars.controller import register as register_seminars
from .speakers.controller import register as register_speakers
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _bootstrap_database(settings) -> None:
    db_config = getattr(settings, "DB_CONFIG")
    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if getattr(settings, "AUTO_SEED_DB", False):
        apply_seed_sql(db_config)
        email = getattr(settings, "ADMIN_EMAIL", "")
        password = getattr(settings, "ADMIN_PASSWORD", "")
        if email and password:
            ensure_admin_user(db_config, email=email, password=password)
        logger.info("Demo seed ready")


def register_health(app: Flask, container: Container) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        connected = container.conn.ping() if container.conn is not None else False
        return jsonify(
            {
                "message": "Server is running",
                "database": "connected" if connected else "disconnected",
            }
        )


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    # One multipart request carries at most MAX_MATERIAL_FILES files; leave room for the form overhead.
    max_bytes = int(getattr(settings, "MAX_MATERIAL_BYTES", MAX_MATERIAL_BYTES))
    app.config["MAX_CONTENT_LENGTH"] = max_bytes * int(getattr(settings, "MAX_MATERIAL_FILES", 10)) + 1024 * 1024
    CORS(app, origins=getattr(settings, "CORS_ORIGINS", "*"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        try:
            _bootstrap_database(settings)
        except Exception as exc:
            # The API still comes up; /api/health reports the store as disconnected.
            logger.warning("Database bootstrap skipped: %s", exc)
        container = build_container(db_config=db_config, settings=settings)

    register_users(app, container)
    register_seminars(app, container)
    register_speakers(app, container)
    register_schedules(app, container)
    register_registrations(app, container)
    register_feedback(app, container)
    register_certificates(app, container)
    register_archives(app, container)
    register_notifications(app, container)
    register_reports(app, container)
    register_health(app, container)

    return app
