from __future__ import annotations

import atexit
import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .app_logger import get_logger, setup_logging
from .common.http import json_response
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig
from .errors import register_error_handlers
from .middleware import attach_request_logging

from .assessments.controller import register as register_tests
from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .courses.controller import register as register_courses
from .enrollments.controller import register as register_enrollments
from .payments.controller import register as register_payments
from .scores.controller import register as register_scores
from .sessions.controller import register as register_sessions
from .students.controller import register as register_students
from .teachers.controller import register as register_teachers

log = get_logger("app")

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"

API_ROOTS = {
    "students": "/api/students",
    "teachers": "/api/teachers",
    "courses": "/api/courses",
    "classes": "/api/classes",
    "enrollments": "/api/enrollments",
    "sessions": "/api/sessions",
    "attendances": "/api/attendances",
    "tests": "/api/tests",
    "scores": "/api/scores",
    "payments": "/api/payments",
}


def _prepare_database(settings, db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(config, schema_path=DATABASE_DIR / "schema.sql")
        log.info("Schema ready (tables=%d)", len(list_tables(config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(config, seed_path=DATABASE_DIR / "seed.sql")
        log.info("Demo seed ready")


def register_routes(app: Flask, container: Container) -> None:
    register_students(app, container)
    register_teachers(app, container)
    register_courses(app, container)
    register_classes(app, container)
    register_enrollments(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_tests(app, container)
    register_scores(app, container)
    register_payments(app, container)

    @app.route("/api", methods=["GET"], endpoint="api_index")
    def api_index():
        return json_response({"message": "English Center Management API", "endpoints": API_ROOTS})

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        ok = container.db.ping()
        return json_response({"status": "OK" if ok else "DEGRADED", "database": ok}, 200 if ok else 503)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Without ``container`` the settings module picked by ``APP_ENV`` supplies
    the database config and the MySQL pool is opened here; tests pass a
    container of in-memory fakes instead.
    """

    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    if container is None:
        db_config = dict(getattr(settings, "DB_CONFIG"))
        _prepare_database(settings, db_config)
        container = build_container(db_config=db_config, grade_bands=getattr(settings, "GRADE_BANDS", None))
        container.db.open()
        atexit.register(container.db.close)
        log.info(
            "Started with settings=%s db=%s pool_size=%s",
            settings_module,
            container.db.config.describe(),
            container.db.config.pool_size,
        )

    attach_request_logging(app)
    register_error_handlers(app)
    register_routes(app, container)
    return app
