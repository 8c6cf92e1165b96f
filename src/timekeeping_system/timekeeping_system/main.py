from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .audit.controller import register as register_audit
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .payroll.controller import register as register_payroll
from .requests.controller import register as register_requests
from .schedules.controller import register as register_schedules
from .time_bank.controller import register as register_time_bank
from .time_records.controller import register as register_time_records
from .worked_hours.controller import register as register_worked_hours

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def configure_logging(settings) -> None:
    level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    fmt = getattr(settings, "LOG_FORMAT", "%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=fmt)


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(settings)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            overtime_expiration_days=int(getattr(settings, "OVERTIME_EXPIRATION_DAYS", 180)),
            expiry_warning_days=int(getattr(settings, "TIME_BANK_EXPIRY_WARNING_DAYS", 30)),
            business_days_per_week=int(getattr(settings, "BUSINESS_DAYS_PER_WEEK", 5)),
        )

    register_error_handlers(app)
    register_time_records(app, container)
    register_schedules(app, container)
    register_worked_hours(app, container)
    register_time_bank(app, container)
    register_requests(app, container)
    register_payroll(app, container)
    register_audit(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return {"success": True, "status": "ok"}

    return app
