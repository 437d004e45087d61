from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_SUMMARY_MODEL, DEFAULT_SUMMARY_TIMEOUT_SECONDS, DEFAULT_TOKEN_TTL_MINUTES
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables
from .milk.controller import register as register_milk
from .reports.controller import register as register_reports
from .summaries.controller import register as register_summaries
from .summaries.summarizer import DEFAULT_BASE_URL, OpenAIChatSummarizer
from .users.controller import register as register_users
from .workoff.controller import register as register_workoff

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"message": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error")
        return jsonify({"message": "Internal server error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["JWT_SECRET"] = getattr(settings, "JWT_SECRET", None) or app.secret_key
    app.config["JWT_TTL_MINUTES"] = int(getattr(settings, "JWT_TTL_MINUTES", DEFAULT_TOKEN_TTL_MINUTES))
    app.config["COOKIE_SECURE"] = bool(getattr(settings, "COOKIE_SECURE", False))

    CORS(app, origins=getattr(settings, "CORS_ORIGINS", ["http://localhost:3000"]), supports_credentials=True)
    _register_error_handlers(app)

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
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        summarizer = OpenAIChatSummarizer(
            api_key=getattr(settings, "OPENAI_API_KEY", None),
            model=getattr(settings, "OPENAI_MODEL", DEFAULT_SUMMARY_MODEL),
            base_url=getattr(settings, "OPENAI_BASE_URL", DEFAULT_BASE_URL),
            timeout=getattr(settings, "SUMMARY_TIMEOUT_SECONDS", DEFAULT_SUMMARY_TIMEOUT_SECONDS),
        )
        container = build_container(db_config=db_config, summarizer=summarizer)

    register_users(app, container)
    register_attendance(app, container)
    register_workoff(app, container)
    register_reports(app, container)
    register_summaries(app, container)
    register_milk(app, container)

    return app
