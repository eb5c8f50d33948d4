from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .bookmarks.controller import register as register_bookmarks
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .timetable.controller import register as register_timetable
from .users.controller import register as register_users

logger = logging.getLogger("dept_attendance")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    default_level = "DEBUG" if app.config["DEBUG"] else "INFO"
    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", default_level)).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if container is None:
        root = Path(__file__).resolve().parents[3]
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=root / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=root / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            utc_offset_minutes=int(getattr(settings, "TIMEZONE_OFFSET_MINUTES", 330)),
            extra_minutes=int(getattr(settings, "TIME_OFFSET_MINUTES", 0)),
        )

    app.extensions["container"] = container

    register_users(app, container)
    register_dashboard(app, container)
    register_timetable(app, container)
    register_attendance(app, container)
    register_bookmarks(app, container)

    return app
